"""Job board backend: jobs, applications, dashboards, and salary reconciliation."""
