from sampling_approval.config.settings import LoggingConfig, ServiceConfig, Settings, load_settings

__all__ = ["LoggingConfig", "ServiceConfig", "Settings", "load_settings"]
