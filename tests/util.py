from sqlalchemy import event
from sqlalchemy.orm import Query
from sqlalchemy.dialects import postgresql as pg


def _insert_query_params(statement_str, parameters, dialect):
    """ Compile a statement by inserting *unquoted* parameters into the query """
    return statement_str % parameters


def stmt2sql(stmt):
    """ Convert an SqlAlchemy statement into a string """
    # See: http://stackoverflow.com/a/4617623/134904
    # This intentionally does not escape values!
    dialect = pg.dialect()
    query = stmt.compile(dialect=dialect)
    return _insert_query_params(query.string, query.params, pg.dialect())


def q2sql(q):
    """ Convert an SqlAlchemy query to string """
    return stmt2sql(q.statement)


class TestQueryStringsMixin:
    """ unittest mixin that will help testing query strings """

    def assertQuery(self, qs, *expected_lines):
        """ Compare a query line by line

            Problem: because of dict disorder, you can't just compare a query string: columns and expressions may be present,
            but be in a completely different order.
            Solution: compare a query piece by piece.
            To achieve this, you've got to feed the query as a string where every logical piece
            is separated by \n, and we compare the pieces.
            It also removes trailing commas.

            :param expected_lines: the query, separated into pieces
        """
        try:
            # Query?
            if isinstance(qs, Query):
                qs = q2sql(qs)

            # tuple
            expected_lines = '\n'.join(expected_lines)

            # Test
            for line in expected_lines.splitlines():
                self.assertIn(line.strip().rstrip(','), qs)

            # Done
            return qs
        except:
            print(qs)
            raise

    def assertNotInQuery(self, qs, *unexpected):
        """ Test that none of the pieces are in the query """
        if isinstance(qs, Query):
            qs = q2sql(qs)

        for piece in unexpected:
            self.assertNotIn(piece, qs)
        return qs


class QueryCounter:
    """ Counts the number of queries """

    def __init__(self, engine):
        super(QueryCounter, self).__init__()
        self.engine = engine
        self.n = 0

    def start_logging(self):
        event.listen(self.engine, "after_cursor_execute", self._after_cursor_execute_event_handler, named=True)

    def stop_logging(self):
        event.remove(self.engine, "after_cursor_execute", self._after_cursor_execute_event_handler)

    def _after_cursor_execute_event_handler(self, **kw):
        self.n += 1

    # Context manager

    def __enter__(self):
        self.start_logging()
        return self

    def __exit__(self, *exc):
        self.stop_logging()
        return False
