from typing import Any, Iterable, Mapping, Tuple

#: The default page number (1-indexed)
DEFAULT_PAGE = 1

#: The default number of items per page
DEFAULT_PAGE_SIZE = 20

#: The maximum page size the user can ask for
MAX_PAGE_SIZE = 100

#: The largest offset a database will take: a signed 64-bit integer
MAX_OFFSET = 2 ** 63 - 1


class QueryOptions:
    """ Everything the API user wants from a list query: pagination, sorting, filtering, search, preloading

        A QueryOptions object is built once per request, and is only read by the QueryBuilder.
        Use default_query_options() to start with sensible defaults.
    """
    __slots__ = ('page', 'page_size',
                 'sort_by', 'sort_order',
                 'search', 'search_columns',
                 'filters', 'preload',
                 'include_archived')

    def __init__(self,
                 page: int = DEFAULT_PAGE,
                 page_size: int = DEFAULT_PAGE_SIZE,
                 sort_by: Iterable[str] = (),
                 sort_order: Iterable[str] = (),
                 search: str = '',
                 search_columns: Iterable[str] = (),
                 filters: Mapping[str, Any] = None,
                 preload: Iterable[str] = (),
                 include_archived: bool = False,
                 ):
        """ Init query options

        :param page: Page number, 1-indexed
        :param page_size: Items per page. Clamped to 1..MAX_PAGE_SIZE by the builder
        :param sort_by: Columns to sort by
        :param sort_order: 'asc' or 'desc' for every column in `sort_by`, by position.
            Can be shorter than `sort_by`: missing ones default to 'asc'.
        :param search: Text to search for (case-insensitive substring match)
        :param search_columns: Columns to search in. Empty: use the entity's searchable columns
        :param filters: Exact-match conditions: {column: value}
        :param preload: Relations to eager load. Dotted names load nested relations: 'articles.comments'
        :param include_archived: Whether the user wants soft-deleted records
        """
        self.page = page
        self.page_size = page_size
        self.sort_by = tuple(sort_by)  # type: Tuple[str]
        self.sort_order = tuple(sort_order)  # type: Tuple[str]
        self.search = search
        self.search_columns = tuple(search_columns)  # type: Tuple[str]
        self.filters = dict(filters or {})  # type: dict[str, Any]
        self.preload = tuple(preload)  # type: Tuple[str]
        self.include_archived = include_archived

    def replace(self, **changes) -> 'QueryOptions':
        """ Copy these options, with some values changed """
        values = {name: getattr(self, name) for name in self.__slots__}
        values.update(changes)
        return self.__class__(**values)

    def __eq__(self, other):
        if not isinstance(other, QueryOptions):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name)
                   for name in self.__slots__)

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__,
            ', '.join('{}={!r}'.format(name, getattr(self, name))
                      for name in self.__slots__))


def default_query_options() -> QueryOptions:
    """ QueryOptions with sensible defaults: first page, 20 items, newest first """
    return QueryOptions(
        page=DEFAULT_PAGE,
        page_size=DEFAULT_PAGE_SIZE,
        sort_by=('created_at',),
        sort_order=('desc',),
    )


def paginate(page: int, page_size: int,
             default_page_size: int = DEFAULT_PAGE_SIZE,
             max_page_size: int = MAX_PAGE_SIZE) -> Tuple[int, int]:
    """ Normalize pagination parameters

        page < 1 becomes 1; page_size < 1 becomes the default; page_size is capped at `max_page_size`.
        page is capped so that the offset fits into MAX_OFFSET.

        :return: (page, page_size)
    """
    if page < 1:
        page = DEFAULT_PAGE
    if page_size < 1:
        page_size = default_page_size
    if page_size > max_page_size:
        page_size = max_page_size
    if (page - 1) * page_size > MAX_OFFSET:
        page = MAX_OFFSET // page_size + 1
    return page, page_size
