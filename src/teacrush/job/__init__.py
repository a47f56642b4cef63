"""Job drafting: mutable draft in, validated JobConfig out."""

from teacrush.job.draft import JobConfigModel, JobDraft, clean_path

__all__ = ["JobConfigModel", "JobDraft", "clean_path"]
