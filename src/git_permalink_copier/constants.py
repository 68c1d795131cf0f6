import re

# How many commits back (in graph steps) to look for one that a remote branch points at
DEFAULT_MAX_DEPTH = 20

# Remote URL shapes:
#   - `git@github.com:owner/repo.git`
#   - `https://github.com/owner/repo.git`
SSH_REMOTE_RE = re.compile(r"^[^@/\s]+@([^:/\s]+):([^/\s]+)/([^/\s]+?)(?:\.git)?/?$")
HTTPS_REMOTE_RE = re.compile(r"^https?://(?:[^@/\s]+@)?([^/\s]+)/([^/\s]+)/([^/\s]+?)(?:\.git)?/?$")

# Zero-context unified diff hunk header, e.g. `@@ -12,3 +12,0 @@ def foo():`
DIFF_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

# Branches pointing at a commit are listed by full name; symbolic `<remote>/HEAD` aliases are skipped
REMOTE_REFS_PREFIX = "refs/remotes"
