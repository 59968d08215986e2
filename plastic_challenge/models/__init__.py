from .user import User
from .environmental_factor import EnvironmentalFactor
from .log_entry import LogEntry
from .certificate import CertificateAward, CertificateDefinition

__all__ = ["User", "EnvironmentalFactor", "LogEntry", "CertificateDefinition", "CertificateAward"]
