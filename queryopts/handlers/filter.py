"""
### Filters

Every query string parameter that's not one of the reserved names is an exact-match filter:

```
GET /api/user?status=active&role_id=3
```

gives `WHERE status = 'active' AND role_id = 3`.

Values arrive as strings, and are converted to the column's type when it's a boolean or a number.

NOTE: filters are not whitelisted, unless the entity configuration has `filterable_columns`:
any column of the model can be filtered by. Parameters that aren't columns are ignored.
"""

from logging import getLogger

from sqlalchemy import and_

from .base import QueryOptionsHandlerBase

logger = getLogger(__name__)


class FilterHandler(QueryOptionsHandlerBase):
    """ Exact-match filters: { column: value }

        Supports: Columns
    """

    query_options_section_name = 'filter'

    #: String values that mean `True` or `False` for a boolean column
    BOOLEAN_VALUES = {'true': True, '1': True, 'false': False, '0': False}

    def __init__(self, model, bags, entity_type, registry):
        super(FilterHandler, self).__init__(model, bags, entity_type, registry)

        # On input
        #: dict: { column name: value }
        self.filters = None

    def validate_config(self):
        if self.config is not None and self.config.filterable_columns is not None:
            self.validate_properties(self.config.filterable_columns, where='filterable_columns')

    def is_filterable(self, name: str) -> bool:
        """ Can the column be filtered by? """
        if name not in self.bags.columns:
            return False
        if self.config is not None and self.config.filterable_columns is not None:
            return name in self.config.filterable_columns
        return True

    def input(self, options):
        super(FilterHandler, self).input(options)

        self.filters = {}
        for name, value in options.filters.items():
            if not self.is_filterable(name):
                logger.debug('Dropping filter %r: not a filterable column of %r', name, self.bags.model_name)
                continue
            self.filters[name] = self._coerce_value(name, value)
        return self

    def _coerce_value(self, name: str, value):
        """ Convert a string value to the column's type, if we can

            Values that do not convert are left as they are: the database will have its say.
        """
        if not isinstance(value, str):
            return value

        python_type = self.bags.columns.get_python_type(name)
        if python_type is bool:
            return self.BOOLEAN_VALUES.get(value.lower(), value)
        elif python_type in (int, float):
            try:
                return python_type(value)
            except ValueError:
                return value
        else:
            return value

    def compile_statement(self):
        """ Create an SQL statement: all conditions, ANDed

        :rtype: sqlalchemy.sql.elements.BooleanClauseList
        """
        return and_(*[self.bags.columns[name] == value
                      for name, value in self.filters.items()])

    def alter_query(self, query):
        if not self.filters:
            return query  # short-circuit
        return query.filter(self.compile_statement())
