"""JobLinkHub API: personal job-application tracker backend."""
