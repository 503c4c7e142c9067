from collections import OrderedDict
from copy import copy
from typing import Union

from sqlalchemy.orm import Query, Session

from . import handlers
from .bag import ModelPropertyBags, entity_type_for
from .config import EntityConfigRegistry
from .options import QueryOptions
from .response import paginated_response
from .util import QueryBuilderSettingsHandler


class QueryBuilder:
    """ Turns QueryOptions into an SqlAlchemy Query

        Example:

            builder = QueryBuilder(models.User, registry)

            opts = parse_from_request()
            users = builder.build(ssn, opts).all()
            total = builder.count(ssn, opts)

        A builder is created once per model, at startup, and is reused for every request:
        it keeps no state between queries.
    """

    # The class to use for getting structural data from a model
    _MODEL_PROPERTY_BAGS_CLS = ModelPropertyBags

    def __init__(self, model, registry: EntityConfigRegistry, entity_type: str = None, **handler_settings):
        """ Init a query builder

        :param model: SqlAlchemy model to build queries for
        :type model: sqlalchemy.ext.declarative.DeclarativeMeta
        :param registry: The registry to look the entity configuration up in
        :param entity_type: Name of the entity configuration to use.
            Default: taken from the model (see `entity_type_for()`)
        :param handler_settings: Settings for handlers.
            These are just plain kwargs names for every handler object's __init__ method.
            See QueryBuilderSettingsDict for the list.
        :raises InvalidColumnError: The entity configuration mentions a column the model does not have
        :raises InvalidRelationError: The entity configuration mentions a relation the model does not have
        :raises KeyError: Unknown settings
        """
        self._model = model
        self._bags = self._MODEL_PROPERTY_BAGS_CLS.for_model(model)
        self._registry = registry
        self._entity_type = entity_type or entity_type_for(model)

        # Initialize the settings
        self._handler_settings = QueryBuilderSettingsHandler(handler_settings)

        # Get ready: handlers
        self._init_handlers()

    @property
    def model(self):
        return self._model

    @property
    def entity_type(self) -> str:
        return self._entity_type

    @property
    def config(self):
        """ The entity configuration this builder works with, or `None` """
        return self._registry.get_config(self._entity_type)

    def build(self, query_or_session: Union[Query, Session, None], options: QueryOptions) -> Query:
        """ Apply QueryOptions to a query that selects active (not soft-deleted) rows

        :param query_or_session: Query to start with, or a session object to initiate the query with
        :param options: Query options
        :rtype: sqlalchemy.orm.Query
        """
        query, _ = self._build(query_or_session, options, archived=False)
        return query

    def build_archived(self, query_or_session: Union[Query, Session, None], options: QueryOptions) -> Query:
        """ Apply QueryOptions to a query that selects archived (soft-deleted) rows only

        :rtype: sqlalchemy.orm.Query
        """
        query, _ = self._build(query_or_session, options, archived=True)
        return query

    def build_requested(self, query_or_session: Union[Query, Session, None], options: QueryOptions) -> Query:
        """ Apply QueryOptions; active or archived rows, as `options.include_archived` says

        :rtype: sqlalchemy.orm.Query
        """
        query, _ = self._build(query_or_session, options, archived=options.include_archived)
        return query

    def count(self, query_or_session: Union[Query, Session, None], options: QueryOptions, archived: bool = None) -> int:
        """ Count the rows that match the options

            Only filters, search, and the archive partition matter here:
            no pagination, no sorting, no preloading.

        :param archived: Count archived rows? Default: as `options.include_archived` says
        """
        if archived is None:
            archived = options.include_archived

        query = self._from_query(query_or_session)
        for handler_name, handler in self._input_handlers(options, archived, self.COUNT_HANDLER_NAMES):
            query = handler.alter_query(query)

        # Whatever the initial query had, it's not going to limit the count
        query = query.enable_eagerloads(False).limit(None).offset(None)
        return query.count()

    def paginate(self, query_or_session: Union[Query, Session, None], options: QueryOptions, archived: bool = None) -> dict:
        """ Load a page of results, count them all, and put it into a paginated response

        :param archived: Load archived rows? Default: as `options.include_archived` says
        :return: {data, total, page, page_size, total_pages}
        """
        if archived is None:
            archived = options.include_archived

        query, handlers_ = self._build(query_or_session, options, archived=archived)
        pagination = handlers_['pagination']
        return paginated_response(
            query.all(),
            self.count(query_or_session, options, archived=archived),
            pagination.page,
            pagination.page_size,
        )

    def __repr__(self):
        return '{}({}, entity_type={!r})'.format(self.__class__.__name__, self._model.__name__, self._entity_type)

    # region Handlers

    # Every step is implemented by a handler class.
    # Doing it this way enables you to override the way they are initialized, and use a custom builder class with
    # custom handlers.

    _QO_HANDLER_PAGINATION = handlers.PaginationHandler
    _QO_HANDLER_SORT = handlers.SortHandler
    _QO_HANDLER_FILTER = handlers.FilterHandler
    _QO_HANDLER_SEARCH = handlers.SearchHandler
    _QO_HANDLER_PRELOAD = handlers.PreloadHandler
    _QO_HANDLER_ARCHIVE = handlers.ArchiveHandler

    # Note that the ordering of these handlers is the order in which they receive their input.
    # It only matters for the readability of logs and the final input values.
    HANDLER_NAMES = ('pagination',
                     'sort',
                     'filter',
                     'search',
                     'preload',
                     'archive')

    #: The order in which handlers alter the query.
    #: 'pagination' goes last: Query refuses filter() and order_by() once LIMIT is applied
    ALTER_QUERY_HANDLER_NAMES = ('sort',
                                 'filter',
                                 'search',
                                 'archive',
                                 'preload',
                                 'pagination')

    #: Handlers that matter for counting
    COUNT_HANDLER_NAMES = ('filter',
                           'search',
                           'archive')

    def _init_handlers(self):
        """ Initialize every handler """
        self._handlers = OrderedDict()
        for name in self.HANDLER_NAMES:
            handler_cls = getattr(self, '_QO_HANDLER_' + name.upper())
            handler = self._init_handler(name, handler_cls)

            # Make sure the configuration fits the model
            handler.validate_config()

            self._handlers[name] = handler

        # Check settings
        self._handler_settings.raise_if_invalid_handler_settings(self)

    def _init_handler(self, handler_name, handler_cls):
        """ Init a handler, and load its settings """
        handler_settings = self._handler_settings.get_settings(handler_name, handler_cls)
        return handler_cls(self._model, self._bags, self._entity_type, self._registry, **handler_settings)

    def _input_handlers(self, options, archived, names):
        """ Get fresh copies of handlers, with input

        :return: list of (name, handler)
        """
        ret = []
        for name in names:
            handler = copy(self._handlers[name])
            if name == 'archive':
                handler.input(options, archived=archived)
            else:
                handler.input(options)
            ret.append((name, handler))
        return ret

    def _build(self, query_or_session, options, archived):
        """ Apply every handler to the query

        :return: (query, dict of handlers)
        """
        query = self._from_query(query_or_session)

        handlers_ = OrderedDict(self._input_handlers(options, archived, self.HANDLER_NAMES))
        for handler_name in self.ALTER_QUERY_HANDLER_NAMES:
            query = handlers_[handler_name].alter_query(query)

        return query, handlers_

    # endregion

    def _from_query(self, query_or_session):
        """ Get the query to work with

            Query objects are generative: every method makes a copy,
            so the caller's query is never modified.
        """
        if query_or_session is None:
            return Query([self._model])
        elif isinstance(query_or_session, Session):
            return query_or_session.query(self._model)
        elif isinstance(query_or_session, Query):
            return query_or_session
        else:
            raise ValueError('Argument must be Query or Session')
