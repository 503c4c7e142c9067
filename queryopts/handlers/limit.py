"""
### Pagination

Pagination corresponds to the `LIMIT .. OFFSET ..` part of an SQL query.

```
GET /api/user?page=3&pageSize=50
```

* `page` is the page number, starting with 1
* `pageSize` is the number of items per page: 20 by default, 100 at most

Nonsense values are quietly replaced with defaults.
"""

from .base import QueryOptionsHandlerBase
from ..options import paginate


class PaginationHandler(QueryOptionsHandlerBase):
    """ Pagination: page number and page size into OFFSET and LIMIT """

    query_options_section_name = 'pagination'

    def __init__(self, model, bags, entity_type, registry, default_page_size=20, max_page_size=100):
        """ Init pagination

        :param default_page_size: The page size to use when the input makes no sense
        :param max_page_size: The maximum number of items that can be loaded with this query.
            The user can never go any higher than that.
        """
        super(PaginationHandler, self).__init__(model, bags, entity_type, registry)

        # Config
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        assert self.default_page_size > 0 and self.max_page_size > 0

        # On input
        self.page = None
        self.page_size = None

    def input(self, options):
        super(PaginationHandler, self).input(options)

        self.page, self.page_size = paginate(options.page, options.page_size,
                                             default_page_size=self.default_page_size,
                                             max_page_size=self.max_page_size)
        return self

    @property
    def offset(self):
        return (self.page - 1) * self.page_size

    @property
    def limit(self):
        return self.page_size

    def alter_query(self, query):
        """ Apply offset() and limit() to the query """
        return query.offset(self.offset).limit(self.limit)
