from datetime import date
from enum import Enum
from typing import Any, Dict, List


class FormFieldType(str, Enum):
    INPUT = "input"
    TEXTAREA = "textarea"
    PHONE_INPUT = "phoneInput"
    CHECKBOX = "checkbox"
    DATE_PICKER = "datePicker"
    SELECT = "select"
    SKELETON = "skeleton"


GENDER_OPTIONS: List[str] = ["Male", "Female", "Other"]

IDENTIFICATION_TYPES: List[str] = [
    "Birth Certificate",
    "Driver's License",
    "Medical Insurance Card/Policy",
    "Military ID Card",
    "National Identity Card",
    "Passport",
    "Resident Alien Card (Green Card)",
    "Social Security Card",
    "State ID Card",
    "Student ID Card",
    "Voter ID Card",
]

DOCTORS: List[Dict[str, str]] = [
    {"image": "/assets/images/dr-green.png", "name": "John Green"},
    {"image": "/assets/images/dr-cameron.png", "name": "Leila Cameron"},
    {"image": "/assets/images/dr-livingston.png", "name": "David Livingston"},
    {"image": "/assets/images/dr-peter.png", "name": "Evan Peter"},
    {"image": "/assets/images/dr-powell.png", "name": "Jane Powell"},
    {"image": "/assets/images/dr-remirez.png", "name": "Alex Ramirez"},
    {"image": "/assets/images/dr-lee.png", "name": "Jasmine Lee"},
    {"image": "/assets/images/dr-cruz.png", "name": "Alyana Cruz"},
    {"image": "/assets/images/dr-sharma.png", "name": "Hardik Sharma"},
]


def patient_form_default_values() -> Dict[str, Any]:
    """Fresh defaults for the registration form (birth date is 'today')."""
    return {
        "name": "",
        "email": "",
        "phone": "",
        "birthDate": date.today().isoformat(),
        "gender": "Male",
        "address": "",
        "occupation": "",
        "emergencyContactName": "",
        "emergencyContactNumber": "",
        "primaryPhysician": "",
        "insuranceProvider": "",
        "insurancePolicyNumber": "",
        "allergies": "",
        "currentMedication": "",
        "familyMedicalHistory": "",
        "pastMedicalHistory": "",
        "identificationType": "Birth Certificate",
        "identificationNumber": "",
        "identificationDocument": [],
        "treatmentConsent": False,
        "disclosureConsent": False,
        "privacyConsent": False,
    }


USER_FORM_DEFAULT_VALUES: Dict[str, Any] = {"name": "", "email": "", "phone": ""}
