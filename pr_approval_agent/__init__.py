# PR Approval Gate - Approval Agent Package
#
# This package contains the pipeline that checks a pull request for a
# maintainer approval reference and closes it when none is valid. Each
# stage is in its own file following the one-function-per-file pattern.
#
# The pipeline is orchestrated by approval_pipeline_main.py and runs inside
# a GitHub Actions runner. It reads the pull request from the event payload,
# reads the approval comment, its issue and the approver's permission from
# the GitHub API, and writes back to GitHub (auto-close comment, PR state).
#
# Stage flow:
#   1. Contributor Gate (optional) -> 2. Extract Reference
#   -> 3. Verify Approval -> 4. Close Pull Request (on violation)
