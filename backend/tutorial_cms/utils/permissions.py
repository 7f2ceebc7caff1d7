"""역할 상수와 라이프사이클 라우트별 허용 역할 묶음입니다."""

ADMIN = "admin"
EDITOR = "editor"
REVIEWER = "reviewer"

CONTENT_EDITORS = (ADMIN, EDITOR)
CONTENT_REVIEWERS = (ADMIN, REVIEWER)
STAFF_ROLES = (ADMIN, EDITOR, REVIEWER)
