"""Value types exchanged with the IMS MmTel simulator."""

from ims.types.capabilities import MmTelCapabilities, MmTelCapability, parse_capability
from ims.types.reason_info import ImsReasonInfo
from ims.types.registration import RegistrationTech, parse_registration_tech

__all__ = [
    "ImsReasonInfo",
    "MmTelCapabilities",
    "MmTelCapability",
    "RegistrationTech",
    "parse_capability",
    "parse_registration_tech",
]
