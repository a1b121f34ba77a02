"""Constants shared across the plugin."""
from .license.licensing import LicenseType


class PLUGIN:
    ID = "index_lifecycle_management"
    minimum_license_type = LicenseType.BASIC
    title = "Index Lifecycle Policies"


API_BASE_PATH = "/api/index_lifecycle_management"

# Explain endpoint across every index
ILM_EXPLAIN_PATH = "/*/_ilm/explain"

LICENSE_CHECK_ERROR_MESSAGE = "License check failed"
