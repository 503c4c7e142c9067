from ..bag import ModelPropertyBags
from ..config import EntityConfigRegistry
from ..exc import InvalidColumnError


class QueryOptionsHandlerBase:
    """ An implementation of a single step of the QueryBuilder

        Every subclass handles one part of QueryOptions: pagination, sorting, filters, and so on.
    """

    #: Name of the step this object is handling
    query_options_section_name = None

    def __init__(self, model, bags: ModelPropertyBags, entity_type: str, registry: EntityConfigRegistry):
        """ Initialize the handler with a model.

        This method does *not* receive any input data just yet: a handler is initialized
        once, with its settings, and then copied for every input.

        :param model: The sqlalchemy model it's being applied to
        :type model: sqlalchemy.ext.declarative.DeclarativeMeta
        :param bags: Model bags
        :param entity_type: Name of the entity type, for whitelist lookups
        :param registry: Entity configuration registry

        NOTE: Any arguments that have default values will be treated as handler settings!!
        """
        #: The model to build queries for
        self.model = model
        #: Model property bags: because we need access to the lists of its properties
        self.bags = bags
        #: Entity type and its configuration
        self.entity_type = entity_type
        self.registry = registry
        self.config = registry.get_config(entity_type)

        # Has the input() method been called already?
        self.input_received = False

    def __copy__(self):
        """ Handlers are reused: their state before input() is copied for every query """
        cls = self.__class__
        result = cls.__new__(cls)
        result.__dict__.update(self.__dict__)
        return result

    def validate_config(self):
        """ Check that the entity configuration only mentions things that the model has

            This is a programmer's error, not the API user's, so it raises.

            :raises InvalidColumnError
            :raises InvalidRelationError
        """

    def validate_properties(self, prop_names, bag=None, where=None):
        """ Validate the given list of property names against `self.bags.columns`

        :param prop_names: List of property names
        :param bag: A specific bag to use
        :raises InvalidColumnError
        """
        if bag is None:
            bag = self.bags.columns

        invalid = bag.get_invalid_names(prop_names)
        if invalid:
            raise InvalidColumnError(self.bags.model_name,
                                     sorted(invalid)[0],
                                     where or self.query_options_section_name)

    def input(self, options):
        """ Take the part of QueryOptions this handler is responsible for.

        The purpose of this method is to receive the input, normalize it, and store it
        as public properties, so that external tools may inspect the resulting values.
        Invalid input never raises: it's normalized or dropped.

        :param options: The query options
        :type options: queryopts.options.QueryOptions
        :rtype: QueryOptionsHandlerBase
        """
        self.input_received = True

        # Make sure that input() can only be used once
        self.input = self.__raise_input_not_reusable

        return self

    def __raise_input_not_reusable(self, *args, **kwargs):
        raise RuntimeError("You can't use the {}.input() method twice. "
                           "copy() the handler!"
                           .format(self.__class__.__name__))

    def compile_statement(self):
        """ Compile a statement

        :return: SQL statement
        """
        raise NotImplementedError()

    def alter_query(self, query):
        """ Alter the given query and apply the step this handler is handling

        :param query: The query to apply the options to
        :type query: sqlalchemy.orm.Query
        :rtype: sqlalchemy.orm.Query
        """
        raise NotImplementedError()
