from .bag import entity_type_for
from .config import EntityConfigRegistry
from .query import QueryBuilder


class QueryOptsBase:
    """ Mixin for SqlAlchemy models that provides the .query_builder() method for convenience

        Example:

            Base = declarative_base(cls=QueryOptsBase)

            class User(Base):
                __tablename__ = 'users'
                __entity_type__ = 'user'  # optional: the lowercased class name is used otherwise
    """

    #: The name of the entity configuration to use for this model
    __entity_type__ = None

    @classmethod
    def entity_type(cls) -> str:
        """ Get the entity type name for this model """
        return entity_type_for(cls)

    # Override this method in your subclass in order to configure builders on a per-model basis
    @classmethod
    def _init_query_builder(cls, registry: EntityConfigRegistry, **handler_settings) -> QueryBuilder:
        """ Make a QueryBuilder. Is only invoked once per registry. """
        return QueryBuilder(cls, registry, cls.entity_type(), **handler_settings)

    __query_builder_per_class_cache = {}

    @classmethod
    def query_builder(cls, registry: EntityConfigRegistry, **handler_settings) -> QueryBuilder:
        """ Get a QueryBuilder for this model ; initialize it only once per registry and settings

            Builders are cached for the lifetime of the process, and keep their registries alive.
            Use it with the one registry the application has; make a QueryBuilder() directly otherwise.
        """
        # Every model class gets its own builder, and no one inherits it.
        key = (cls, id(registry), frozenset(handler_settings.items()))
        try:
            return cls.__query_builder_per_class_cache[key]
        except KeyError:
            cls.__query_builder_per_class_cache[key] = builder = cls._init_query_builder(registry, **handler_settings)
            return builder
