"""
### Archive

Soft-deleted rows are not removed from the table: they get a non-NULL `deleted_at`.

Every query goes to one of the two partitions of the table:

* active rows: `WHERE deleted_at IS NULL`
* archived rows: `WHERE deleted_at IS NOT NULL`

The two never overlap, and together they are the whole table.
Archived rows are an explicit opt-in: `GET /api/user?includeArchived=true`.
"""

from sqlalchemy import false

from .base import QueryOptionsHandlerBase


class ArchiveHandler(QueryOptionsHandlerBase):
    """ Soft-delete partition: active or archived rows """

    query_options_section_name = 'archive'

    def __init__(self, model, bags, entity_type, registry, soft_delete_column='deleted_at'):
        """ Init the archive partition

        :param soft_delete_column: The column that is NULL for active rows, and set for archived ones.
            `None` if the model does not do soft deletes.
        """
        super(ArchiveHandler, self).__init__(model, bags, entity_type, registry)

        # Config
        self.soft_delete_column = soft_delete_column

        # On input
        self.archived = None

    def validate_config(self):
        if self.soft_delete_column is not None:
            self.validate_properties([self.soft_delete_column], where='soft_delete_column')

    def input(self, options, archived=False):
        super(ArchiveHandler, self).input(options)
        self.archived = bool(archived)
        return self

    def compile_statement(self):
        """ Create an SQL statement that selects the partition """
        # No soft deletes: nothing is ever archived
        if self.soft_delete_column is None:
            return false() if self.archived else None

        column = self.bags.columns[self.soft_delete_column]
        if self.archived:
            return column.is_not(None)
        else:
            return column.is_(None)

    def alter_query(self, query):
        condition = self.compile_statement()
        if condition is None:
            return query
        return query.filter(condition)
