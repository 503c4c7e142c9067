"""
### Query String

QueryOptions are parsed from the query string of a request:

```
GET /users?page=2&pageSize=50&search=john&searchColumns=name,email&sortBy=name,created_at&sortOrder=asc,desc&preload=role&status=active
```

Supported parameters:

    page            - Page number (1-indexed), default: 1
    pageSize        - Items per page, default: 20, max: 100
    sortBy          - Comma-separated columns to sort by
    sortOrder       - Comma-separated order (asc/desc), defaults to asc
    search          - Text search term
    searchColumns   - Comma-separated columns to search in
    preload         - Comma-separated relations to eager load
    includeArchived - Soft-deleted records instead of active ones (true/1)

Any other parameter is an exact-match filter.

In a Flask view:

```python
@app.route('/users')
def list_users():
    opts = parse_from_request()
    return jsonify(user_builder.paginate(db.session, opts))
```
"""

import re
from typing import Any, Mapping, Optional, Tuple
from urllib.parse import parse_qs

from flask import request as current_request

from .options import QueryOptions, default_query_options, DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_OFFSET

#: Parameter names that are never treated as filters
RESERVED_PARAMS = frozenset((
    'page',
    'pageSize',
    'sortBy',
    'sortOrder',
    'search',
    'searchColumns',
    'preload',
    'includeArchived',
))

# An integer, the way the API user is allowed to write it
_INTEGER_RE = re.compile(r'[+-]?[0-9]+')


def parse_query_options(args: Mapping[str, Any]) -> QueryOptions:
    """ Parse query string arguments into QueryOptions

        Invalid values are ignored: the defaults are kept.

        :param args: Query string arguments. One of:
            * werkzeug `MultiDict` (Flask's `request.args`)
            * dict of lists, as given by `urllib.parse.parse_qs()`
            * dict of strings
    """
    opts = default_query_options()

    page = _parse_positive_int(_get_first(args, 'page'))
    if page is not None:
        opts.page = page

    page_size = _parse_positive_int(_get_first(args, 'pageSize'))
    if page_size is not None:
        opts.page_size = page_size

    sort_by = _get_first(args, 'sortBy')
    if sort_by:
        opts.sort_by = _split_list(sort_by)

    sort_order = _get_first(args, 'sortOrder')
    if sort_order:
        opts.sort_order = _split_list(sort_order)

    search = _get_first(args, 'search')
    if search:
        opts.search = search

    search_columns = _get_first(args, 'searchColumns')
    if search_columns:
        opts.search_columns = _split_list(search_columns)

    preload = _get_first(args, 'preload')
    if preload:
        opts.preload = _split_list(preload)

    include_archived = _get_first(args, 'includeArchived')
    if include_archived:
        opts.include_archived = include_archived in ('true', '1')

    opts.filters = parse_filters(args)

    return opts


def parse_filters(args: Mapping[str, Any]) -> dict:
    """ Get custom filters from query string arguments

        Every parameter that's not reserved is a filter. When it's given more than once, the first value wins.
    """
    filters = {}
    for key in args.keys():
        if key in RESERVED_PARAMS:
            continue
        value = _get_first(args, key)
        if value is not None:
            filters[key] = value
    return filters


def parse_query_string(query_string: str) -> QueryOptions:
    """ Parse a raw query string, like 'page=2&sortBy=name' """
    return parse_query_options(parse_qs(query_string, keep_blank_values=True))


def parse_from_request(request=None) -> QueryOptions:
    """ Parse QueryOptions from a Flask request

        :param request: The request. Default: the current request
        :type request: flask.Request
    """
    if request is None:
        request = current_request
    return parse_query_options(request.args)


def get_page(args: Mapping[str, Any]) -> int:
    """ Get the page number from query string arguments; DEFAULT_PAGE if invalid or not provided """
    page = _parse_positive_int(_get_first(args, 'page'))
    return DEFAULT_PAGE if page is None else page


def get_page_size(args: Mapping[str, Any], max_page_size: int = MAX_PAGE_SIZE) -> int:
    """ Get the page size from query string arguments; DEFAULT_PAGE_SIZE if invalid, `max_page_size` if too large """
    page_size = _parse_positive_int(_get_first(args, 'pageSize'))
    if page_size is None:
        return DEFAULT_PAGE_SIZE
    return min(page_size, max_page_size)


def _get_first(args: Mapping[str, Any], name: str) -> Optional[str]:
    """ Get the first value of a query string argument """
    # werkzeug MultiDict: get() already gives the first value
    if hasattr(args, 'getlist'):
        return args.get(name, None)

    value = args.get(name, None)
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _parse_positive_int(value: Optional[str]) -> Optional[int]:
    """ Parse an integer > 0, or give a `None`

        Only ASCII digits with an optional sign are accepted: no spaces, no underscores.
        Numbers that do not fit into a signed 64-bit integer are invalid, too.
    """
    if not value or not _INTEGER_RE.fullmatch(value):
        return None
    number = int(value)
    return number if 0 < number <= MAX_OFFSET else None


def _split_list(value: str) -> Tuple[str]:
    """ Split a comma-separated list """
    return tuple(item.strip() for item in value.split(','))
