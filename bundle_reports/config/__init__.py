from .ini_config import AppSettings, AuditThresholds, IniConfig

__all__ = ["AppSettings", "AuditThresholds", "IniConfig"]
