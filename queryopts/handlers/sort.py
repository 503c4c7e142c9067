"""
### Sorting

Sorting corresponds to the `ORDER BY` part of an SQL query.

```
GET /api/user?sortBy=name,created_at&sortOrder=asc,desc
```

* `sortBy` is a comma-separated list of columns
* `sortOrder` gives a direction for every column, by position: `asc` or `desc`.
  It may be shorter than `sortBy`: missing directions are `asc`.

Only columns whitelisted in the entity's `sortable_columns` are used; the rest are quietly dropped.

When no `sortBy` is given, the entity's `default_sort` is used, ascending.
When the entity has no `default_sort` either, results are sorted by `created_at DESC`.
"""

from collections import OrderedDict
from logging import getLogger

from .base import QueryOptionsHandlerBase

logger = getLogger(__name__)


class SortHandler(QueryOptionsHandlerBase):
    """ Sorting

        Produces an OrderedDict() of a sort spec: {column: +1|-1}

        Supports: Columns
    """

    query_options_section_name = 'sort'

    def __init__(self, model, bags, entity_type, registry, fallback_sort_column='created_at'):
        """ Init sorting

        :param fallback_sort_column: The column to sort by, descending, when nothing else is available
        """
        super(SortHandler, self).__init__(model, bags, entity_type, registry)

        # Config
        self.fallback_sort_column = fallback_sort_column

        # On input
        #: OrderedDict() of a sort spec: {key: +1|-1}
        self.sort_spec = None

    def validate_config(self):
        if self.config is not None:
            self.validate_properties(self.config.sortable_columns, where='sortable_columns')
            self.validate_properties(self.config.default_sort, where='default_sort')

    def input(self, options):
        super(SortHandler, self).input(options)

        sort_by, sort_order = options.sort_by, options.sort_order

        # No sorting given: use the defaults
        if not sort_by:
            if self.config is not None and self.config.default_sort:
                sort_by = self.config.default_sort
                sort_order = ('asc',) * len(sort_by)
            else:
                self.sort_spec = self._fallback_sort_spec()
                return self

        # Pair columns with directions, by position
        self.sort_spec = OrderedDict()
        for i, name in enumerate(sort_by):
            # A repeated column keeps its first direction
            if name in self.sort_spec:
                continue
            if not self.registry.is_valid_sort_column(self.entity_type, name) or name not in self.bags.columns:
                logger.debug('Dropping sort column %r: not sortable for %r', name, self.entity_type)
                continue
            direction = sort_order[i] if i < len(sort_order) else 'asc'
            self.sort_spec[name] = -1 if direction.lower() == 'desc' else +1

        return self

    def _fallback_sort_spec(self):
        """ Sorting for when there's no sorting """
        # The fallback is not whitelisted: it comes from the code, not from the user.
        # Still, it has to be a column
        if self.fallback_sort_column is None or self.fallback_sort_column not in self.bags.columns:
            return OrderedDict()
        return OrderedDict([(self.fallback_sort_column, -1)])

    def compile_columns(self):
        return [
            self.bags.columns[name].desc() if d == -1 else self.bags.columns[name].asc()
            for name, d in self.sort_spec.items()
        ]

    def alter_query(self, query):
        if not self.sort_spec:
            return query  # short-circuit
        return query.order_by(*self.compile_columns())

    def get_final_input_value(self):
        return ['{} {}'.format(name, 'desc' if d == -1 else 'asc')
                for name, d in self.sort_spec.items()]
