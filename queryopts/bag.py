from typing import Iterable, FrozenSet, Mapping, Optional, Set, Tuple

from sqlalchemy import inspect, TypeDecorator
from sqlalchemy import Column
from sqlalchemy.orm import RelationshipProperty
from sqlalchemy.orm.interfaces import MapperProperty
from sqlalchemy.sql.type_api import TypeEngine


class ModelPropertyBags:
    """ Model Property Bags is the class that lets you get information about the model's columns.

    Whenever a name comes from the configuration or from the API user, it is resolved through these bags:
    a name that's not in a bag is not a part of the model, and can't be used in a query.

    - Columns
    - Relationships
    """
    __bags_per_model_cache = {}

    @classmethod
    def for_model(cls, model) -> 'ModelPropertyBags':
        """ Get bags for a model.

        Please use this method over __init__(), because it initializes those bags only once
        """
        try:
            # Every model class gets its own bags, and no one inherits them.
            # Model classes have an immutable `mappingproxy` for __dict__, so we keep our own cache.
            return cls.__bags_per_model_cache[model]
        except KeyError:
            cls.__bags_per_model_cache[model] = bags = cls(model)
            return bags

    def __init__(self, model):
        """ Init bags

        :param model: Model
        :type model: sqlalchemy.ext.declarative.DeclarativeMeta
        """
        # We don't tolerate aliases here
        insp = inspect(model)
        if insp.is_aliased_class:
            raise TypeError('ModelPropertyBags does not tolerate aliased() models')

        # Initialize
        self.model = model
        self.model_name = model.__name__

        # Init bags
        self.columns = ColumnsBag(_get_model_columns(model, insp))
        self.relations = RelationshipsBag(_get_model_relationships(model, insp))

    @property
    def all_names(self) -> Set[str]:
        """ Get the names of all properties defined for the model """
        return self.columns.names | self.relations.names


class _PropertiesBagBase:
    """ Base class for Property bags """

    def __contains__(self, name: str) -> bool:
        raise NotImplementedError

    def __getitem__(self, name: str) -> MapperProperty:
        raise NotImplementedError

    @property
    def names(self) -> FrozenSet[str]:
        """ Get the set of names """
        raise NotImplementedError

    def get(self, name: str, default=None):
        """ Get a property by name, or a default """
        return self[name] if name in self else default

    def get_invalid_names(self, names: Iterable[str]) -> Set[str]:
        """ Get the names of invalid items

        Use this for validation.
        """
        return set(names) - self.names


class ColumnsBag(_PropertiesBagBase):
    """ Columns bag

    Contains meta-information about columns:
    - list of their names
    - getting a column by name: bag[column_name]
    - the python type of every column
    """

    def __init__(self, columns: Mapping[str, MapperProperty]):
        """ Init columns

        :param columns: Model columns
        """
        self._columns = columns
        self._column_names = frozenset(self._columns.keys())

    @property
    def names(self) -> FrozenSet[str]:
        return self._column_names

    def __iter__(self) -> Iterable[Tuple[str, MapperProperty]]:
        return iter(self._columns.items())

    def __contains__(self, name: str) -> bool:
        return name in self._column_names

    def __getitem__(self, column_name: str) -> MapperProperty:
        return self._columns[column_name]

    def get_python_type(self, name: str) -> Optional[type]:
        """ Get the Python type of a column's values, if the column type tells it """
        try:
            return _get_column_type(self[name]).python_type
        except NotImplementedError:
            return None


class RelationshipsBag(_PropertiesBagBase):
    """ Relationships bag

    Keeps track of relationships of a model.
    """

    def __init__(self, relationships: Mapping[str, RelationshipProperty]):
        """ Init relationships
        :param relationships: Model relationships
        """
        self._relations = relationships
        self._rel_names = frozenset(self._relations.keys())

    @property
    def names(self) -> FrozenSet[str]:
        """ Get the set of relation names """
        return self._rel_names

    def __iter__(self) -> Iterable[Tuple[str, RelationshipProperty]]:
        return iter(self._relations.items())

    def __contains__(self, name: str) -> bool:
        return name in self._relations

    def __getitem__(self, name: str) -> RelationshipProperty:
        return self._relations[name]

    def get_target_model(self, name: str):
        """ Get target model of a relationship """
        return self[name].property.mapper.class_


def _get_model_columns(model, ins):
    """ Get a dict of model columns """
    return {name: getattr(model, name)
            for name, c in ins.column_attrs.items()
            # ignore Labels and other stuff that .items() will always yield
            if isinstance(c.expression, Column)
            }


def _get_model_relationships(model, ins):
    """ Get a dict of model relationships """
    return {name: getattr(model, name)
            for name, c in ins.relationships.items()}


def _get_column_type(col: MapperProperty) -> TypeEngine:
    """ Get column's SQL type """
    if isinstance(col.type, TypeDecorator):
        # Type decorators wrap other types, so we have to handle them carefully
        return col.type.impl
    else:
        return col.type


def entity_type_for(model) -> str:
    """ Get the entity type name for a model: `__entity_type__`, or the lowercased class name """
    return getattr(model, '__entity_type__', None) or model.__name__.lower()
