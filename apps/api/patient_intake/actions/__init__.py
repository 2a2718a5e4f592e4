from .patient import (
    NewUser,
    PatientActions,
    PatientRecord,
    User,
    get_patient_actions,
)

__all__ = ["NewUser", "PatientActions", "PatientRecord", "User", "get_patient_actions"]
