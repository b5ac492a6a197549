from jobguard.modules.jobs.models import Job, JobStatus


__all__ = ["Job", "JobStatus"]
