"""
### Entity Configuration

Every entity type that can be listed through the API has to declare
which of its columns the API user is allowed to sort and search by.
Nothing else is accepted: a column that is not in the whitelist is quietly dropped from the query.

```python
from queryopts import EntityConfig, EntityConfigRegistry

registry = EntityConfigRegistry()
registry.register_config('user', EntityConfig(
    searchable_columns=('name', 'email', 'phone'),
    sortable_columns=('name', 'email', 'created_at', 'updated_at'),
    default_sort=('created_at',),
    default_includes=('role',),
))
registry.freeze()  # no more changes: the app is about to serve requests
```

The registry is supposed to be populated once, at startup, and then frozen.
Registering configurations while requests are being served is not supported.
"""

from logging import getLogger
from typing import Iterable, Optional, Tuple, Union

from .exc import RegistryFrozenError

logger = getLogger(__name__)


class EntityConfig:
    """ Queryable configuration of an entity: which columns can be searched, sorted, and preloaded.

        All lists are stored as tuples: an EntityConfig is never modified once created.
    """
    __slots__ = ('searchable_columns', 'sortable_columns', 'default_sort', 'default_includes',
                 'filterable_columns', 'preloadable_relations')

    def __init__(self,
                 searchable_columns: Iterable[str] = (),
                 sortable_columns: Iterable[str] = (),
                 default_sort: Iterable[str] = (),
                 default_includes: Iterable[str] = (),
                 filterable_columns: Optional[Iterable[str]] = None,
                 preloadable_relations: Optional[Iterable[str]] = None,
                 ):
        """ Init the configuration

        :param searchable_columns: Columns that can be used in text search.
            When the user gives no `searchColumns`, all of them are searched.
        :param sortable_columns: Columns that can be used for ordering results
        :param default_sort: Sorting to use when the user provides none. Always ascending.
        :param default_includes: Relations that are normally preloaded with this entity.
            Informational only: the builder never preloads them on its own.
        :param filterable_columns: Columns that can be used in exact-match filters.
            `None` means "no restriction": any mapped column can be filtered by.
        :param preloadable_relations: Relations that can be preloaded.
            `None` means "no restriction": any relationship can be preloaded.
        """
        self.searchable_columns = tuple(searchable_columns)  # type: Tuple[str]
        self.sortable_columns = tuple(sortable_columns)  # type: Tuple[str]
        self.default_sort = tuple(default_sort)  # type: Tuple[str]
        self.default_includes = tuple(default_includes)  # type: Tuple[str]
        self.filterable_columns = _tuple_or_none(filterable_columns)  # type: Union[Tuple[str], None]
        self.preloadable_relations = _tuple_or_none(preloadable_relations)  # type: Union[Tuple[str], None]

    def __eq__(self, other):
        if not isinstance(other, EntityConfig):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name)
                   for name in self.__slots__)

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__,
            ', '.join('{}={!r}'.format(name, getattr(self, name))
                      for name in self.__slots__))


class EntityConfigRegistry:
    """ A lookup table: entity type name -> EntityConfig

        Create one at startup, register all your entities, freeze() it,
        and give it to every QueryBuilder.

        Unknown entity types never raise errors: every check against them simply fails,
        meaning that nothing is allowed for an unconfigured entity.
    """

    def __init__(self):
        self._configs = {}  # type: dict[str, EntityConfig]
        self._frozen = False

    def register_config(self, entity_type: str, config: EntityConfig) -> 'EntityConfigRegistry':
        """ Register an entity's query configuration

            Overwrites any previous configuration for the same entity type: the last one wins.

            :raises ValueError: invalid entity type name
            :raises RegistryFrozenError: the registry has been frozen
        """
        if not isinstance(entity_type, str) or not entity_type:
            raise ValueError('Entity type must be a non-empty string; {!r} given'.format(entity_type))
        if self._frozen:
            raise RegistryFrozenError(entity_type)

        if entity_type in self._configs:
            logger.debug('Overwriting query configuration for %r', entity_type)
        self._configs[entity_type] = config
        return self

    def get_config(self, entity_type: str) -> Optional[EntityConfig]:
        """ Get the query configuration for an entity type, or `None` """
        return self._configs.get(entity_type, None)

    def is_valid_sort_column(self, entity_type: str, column: str) -> bool:
        """ Check if the column is allowed for sorting """
        config = self.get_config(entity_type)
        if config is None:
            return False
        return column in config.sortable_columns

    def is_valid_search_column(self, entity_type: str, column: str) -> bool:
        """ Check if the column is allowed for searching """
        config = self.get_config(entity_type)
        if config is None:
            return False
        return column in config.searchable_columns

    def freeze(self) -> 'EntityConfigRegistry':
        """ Disallow any further registrations """
        self._frozen = True
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def entity_types(self):
        """ Names of all registered entity types """
        return frozenset(self._configs)

    def __contains__(self, entity_type: str) -> bool:
        return entity_type in self._configs

    def __len__(self):
        return len(self._configs)

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, ', '.join(sorted(self._configs)))


def register_default_configs(registry: EntityConfigRegistry) -> EntityConfigRegistry:
    """ Register the base configuration for the common fields: id, created_at, updated_at """
    return registry.register_config('base_model', EntityConfig(
        searchable_columns=('id', 'created_at', 'updated_at'),
        sortable_columns=('id', 'created_at', 'updated_at'),
        default_sort=('created_at',),
        default_includes=(),
    ))


def _tuple_or_none(value):
    return None if value is None else tuple(value)
