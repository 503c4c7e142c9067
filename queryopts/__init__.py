"""
QueryOpts turns HTTP query strings into safe [SqlAlchemy](http://www.sqlalchemy.org/) queries.

Every list endpoint needs the same things: *pagination*, *sorting*, *filtering*, *search*,
and loading some *related objects*. With QueryOpts, the API user asks for them in the query string:

```
GET /api/user?page=2&pageSize=50&sortBy=name&sortOrder=desc&search=john&preload=role&status=active
```

and you never write a line of that repetitive code again.

Column names are whitelisted per entity type: the API user can only sort and search
by the columns you have allowed. Everything else is quietly ignored.
"""

# Exceptions that are used here and there
from .exc import *

# Entity configuration: what can be sorted and searched
from .config import EntityConfig, EntityConfigRegistry, register_default_configs

# What the API user wants
from .options import QueryOptions, default_query_options, paginate
from .options import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

# QueryOpts needs some information about the properties of your models.
from .bag import ModelPropertyBags, entity_type_for

# The heart of QueryOpts are the handlers:
# that's where QueryOptions are converted to actual SqlAlchemy queries!
from . import handlers

# QueryBuilder applies all handlers to a query
from .query import QueryBuilder

# Declarative base mixin that defines .query_builder() on it
from .sa import QueryOptsBase

# Request and response helpers
from .request import parse_query_options, parse_query_string, parse_from_request, get_page, get_page_size
from .response import paginated_response, pagination_meta, total_pages, error_response

# Settings
from .util import QueryBuilderSettingsDict
