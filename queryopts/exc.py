class BaseQueryOptsException(Exception):
    pass


class InvalidColumnError(BaseQueryOptsException):
    """ Entity configuration mentioned a column that the model does not have """

    def __init__(self, model: str, column_name: str, where: str):
        self.model = model
        self.column_name = column_name
        self.where = where

        super(InvalidColumnError, self).__init__(
            'Invalid column "{column_name}" for "{model}" specified in {where}'.format(
                column_name=column_name,
                model=model,
                where=where)
        )


class InvalidRelationError(InvalidColumnError):
    """ Entity configuration mentioned a relationship that the model does not have """
    def __init__(self, model: str, column_name: str, where: str):
        self.model = model
        self.column_name = column_name
        self.where = where

        super(InvalidColumnError, self).__init__(
            'Invalid relation "{column_name}" for "{model}" specified in {where}'.format(
                column_name=column_name,
                model=model,
                where=where)
        )


class RegistryFrozenError(BaseQueryOptsException):
    """ The entity configuration registry was written to after it has been frozen """

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        super(RegistryFrozenError, self).__init__(
            'Cannot register "{}": the entity configuration registry is frozen'.format(entity_type))
