"""
### Search

A case-insensitive substring search over a few columns at once:

```
GET /api/user?search=john&searchColumns=name,email
```

gives `WHERE (name ILIKE '%john%' OR email ILIKE '%john%')`.

When `searchColumns` is not given, all `searchable_columns` of the entity are searched.
Columns that are not whitelisted are quietly dropped; when none remain, the search is ignored.
"""

from logging import getLogger

from sqlalchemy import or_

from .base import QueryOptionsHandlerBase

logger = getLogger(__name__)


class SearchHandler(QueryOptionsHandlerBase):
    """ Text search: ILIKE over several columns, ORed """

    query_options_section_name = 'search'

    def __init__(self, model, bags, entity_type, registry):
        super(SearchHandler, self).__init__(model, bags, entity_type, registry)

        # On input
        self.search = None
        #: Columns to search in (whitelisted)
        self.search_columns = None

    def validate_config(self):
        if self.config is not None:
            self.validate_properties(self.config.searchable_columns, where='searchable_columns')

    def input(self, options):
        super(SearchHandler, self).input(options)

        self.search = options.search
        self.search_columns = []

        # No search: nothing to do
        if not self.search:
            return self

        # Columns to search in
        candidates = options.search_columns
        if not candidates and self.config is not None:
            candidates = self.config.searchable_columns

        for name in candidates:
            if not self.registry.is_valid_search_column(self.entity_type, name) or name not in self.bags.columns:
                logger.debug('Dropping search column %r: not searchable for %r', name, self.entity_type)
                continue
            self.search_columns.append(name)

        if not self.search_columns:
            logger.debug('Ignoring search for %r: no searchable columns', self.entity_type)
        return self

    def compile_statement(self):
        """ Create an SQL statement: ILIKE conditions, ORed

        :rtype: sqlalchemy.sql.elements.BooleanClauseList
        """
        pattern = '%' + self.search + '%'
        return or_(*[self.bags.columns[name].ilike(pattern)
                     for name in self.search_columns])

    def alter_query(self, query):
        if not self.search or not self.search_columns:
            return query  # short-circuit
        return query.filter(self.compile_statement())
