"""Shared constants for the policy-list-sync application.

For environment-based configuration (site URL, list name, etc.), use the env module:
    from common.env import env
    site_url = env.site_url()
"""

# Timestamp format stored in the list's LastModified column
TIMESTAMP_FORMAT = "%m/%d/%Y %H:%M:%S"

# Category labels written to the list
CATEGORY_POLICY = "Policy"
CATEGORY_PROCEDURE = "Procedure"
CATEGORY_BOTH = "Policy & Procedure"

# URL markers used by department resolution
SITE_MARKER = "/sites/"
LIBRARY_MARKER = "/shared documents/"
ARCHIVE_MARKER = "archive"

# Maximum "/" count in the URL path (scheme and host excluded), per resolver variant
MAX_DEPTH_WITH_WHITELIST = 6
MAX_DEPTH_WITHOUT_WHITELIST = 7

DEFAULT_LIST_NAME = "Policies and Procedures"
DEFAULT_ALLOWED_EXTENSIONS: tuple[str, ...] = (".pdf", ".doc", ".docx")
DEFAULT_SEARCH_ROW_LIMIT = 500
DEFAULT_SEARCH_QUERY = (
    "(Title:policy OR Title:procedure OR Category:policy OR Category:procedure) "
    "AND IsDocument:1 AND (FileExtension:pdf OR FileExtension:doc OR FileExtension:docx)"
)

# Managed properties requested from the search service
SEARCH_SELECT_PROPERTIES: tuple[str, ...] = (
    "Title",
    "Path",
    "LastModifiedTime",
    "Author",
    "Category",
)

# Internal column names of the tracking list
LIST_FIELDS: dict[str, str] = {
    "title": "Title",
    "document_link": "DocumentLink",
    "category": "Category",
    "department": "Department",
    "last_modified": "LastModified",
    "document_author": "DocumentAuthor",
}
