from jobguard.modules.applications.models import Application, ApplicationStatus


__all__ = ["Application", "ApplicationStatus"]
