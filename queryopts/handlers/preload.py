"""
### Preload

Eagerly load related entities together with the results:

```
GET /api/user?preload=role,articles.comments
```

Every relation is loaded with a separate `SELECT .. WHERE id IN (..)` query (`selectinload()`),
and a dotted name goes deeper: `articles.comments` loads the articles, and their comments.

NOTE: relation names are not whitelisted, unless the entity configuration has `preloadable_relations`.
Names that are not relationships of the model are ignored.
"""

from logging import getLogger

from sqlalchemy.orm import selectinload, raiseload

from .base import QueryOptionsHandlerBase
from ..bag import ModelPropertyBags
from ..exc import InvalidRelationError

logger = getLogger(__name__)


class PreloadHandler(QueryOptionsHandlerBase):
    """ Eager loading of relationships, by name """

    query_options_section_name = 'preload'

    def __init__(self, model, bags, entity_type, registry, preload_raiseload=False):
        """ Init preload

        :param preload_raiseload: Make relationships that were not preloaded raise an exception when accessed
        """
        super(PreloadHandler, self).__init__(model, bags, entity_type, registry)

        # Config
        self.preload_raiseload = preload_raiseload

        # On input
        #: dict: { relation path: list of relationship attributes }
        self.relations = None

    def validate_config(self):
        if self.config is None:
            return
        for where in ('default_includes', 'preloadable_relations'):
            for path in getattr(self.config, where) or ():
                if self._resolve_path(path) is None:
                    raise InvalidRelationError(self.bags.model_name, path, where)

    def is_preloadable(self, path: str) -> bool:
        """ Can the relation be preloaded? """
        if self.config is not None and self.config.preloadable_relations is not None:
            return path in self.config.preloadable_relations
        return True

    def _resolve_path(self, path: str):
        """ Resolve a dotted relation path into a list of relationship attributes

            :return: list of relationships, or `None` if any of them does not exist
        """
        bags = self.bags
        relationships = []
        for name in path.split('.'):
            if name not in bags.relations:
                return None
            relationships.append(bags.relations[name])
            bags = ModelPropertyBags.for_model(bags.relations.get_target_model(name))
        return relationships

    def input(self, options):
        super(PreloadHandler, self).input(options)

        self.relations = {}
        for path in options.preload:
            if not self.is_preloadable(path):
                logger.debug('Dropping preload %r: not preloadable for %r', path, self.entity_type)
                continue
            relationships = self._resolve_path(path)
            if relationships is None:
                logger.debug('Dropping preload %r: not a relationship of %r', path, self.bags.model_name)
                continue
            self.relations[path] = relationships
        return self

    def compile_options(self):
        """ Compile a list of loader options for Query.options() """
        options = []
        for relationships in self.relations.values():
            loader = selectinload(relationships[0])
            for relationship in relationships[1:]:
                loader = loader.selectinload(relationship)
            options.append(loader)

        if self.preload_raiseload:
            options.append(raiseload('*'))
        return options

    def alter_query(self, query):
        options = self.compile_options()
        if not options:
            return query  # short-circuit
        return query.options(*options)
