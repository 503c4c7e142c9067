from .settings_dict import QueryBuilderSettingsDict
from .settings_handler import QueryBuilderSettingsHandler
