from typing import Optional

from .inspect import pluck_kwargs_from


class QueryBuilderSettingsDict(dict):
    """ QueryBuilder settings container.

        Is mostly used for nice autocompletion and documentation purposes.

        The keyword settings in this object are just plain kwargs names
        for every handler object's __init__ method,
        which are fed to subclasses of QueryOptionsHandlerBase by QueryBuilderSettingsHandler.
    """

    def __init__(self,
                 # --- pagination
                 default_page_size: int = 20,
                 max_page_size: int = 100,
                 # --- sort
                 fallback_sort_column: Optional[str] = 'created_at',
                 # --- preload
                 preload_raiseload: bool = False,
                 # --- archive
                 soft_delete_column: Optional[str] = 'deleted_at',
                 ):
        """ `QueryBuilder` has a few settings that let you configure the way queries are made.

        These settings can be kept in a QueryBuilderSettingsDict and given to QueryBuilder as keyword arguments.

        Example:
            ```python
            from queryopts import QueryBuilder, QueryBuilderSettingsDict

            builder = QueryBuilder(models.User, registry, **QueryBuilderSettingsDict(
                max_page_size=50,
                soft_delete_column='removed_at',
            ))
            ```

        Args:
            default_page_size (int): (for: pagination)
                The page size to use when the user gives none, or gives nonsense.
            max_page_size (int): (for: pagination)
                The maximum number of items that can be loaded with one query.
                The user can never go any higher than that.
            fallback_sort_column (str | None): (for: sort)
                The column to sort by, descending, when the user gives no sorting
                and the entity has no `default_sort`.
                It's ignored when the model has no such column. `None` disables it.
            preload_raiseload (bool): (for: preload)
                Raise an exception when a relationship that was not preloaded
                is accessed by the application, instead of lazy-loading it with another query.
            soft_delete_column (str | None): (for: archive)
                The column that marks a row as soft-deleted when it's not NULL.
                `None` means the entity is never soft-deleted: active queries return everything,
                archived queries return nothing.
        """
        super(QueryBuilderSettingsDict, self).__init__()
        self.update({k: v
                     for k, v in locals().items()
                     if k not in {'__class__', 'self'}})

    def and_more(self, **settings):
        """ Copy the object and add more settings to it """
        return self.__class__(**{**self, **settings})

    @classmethod
    def pluck_from(cls, dict, skip=()):
        """ Initialize the class by plucking kwargs from a dictionary.

            This is useful when you have a dict with configuration for multiple classes,
            and you want to initialize this one by getting only the keys you need.
        """
        kwargs = pluck_kwargs_from(dict,
                                   for_func=cls.__init__,
                                   skip=skip
                                   )
        return cls(**kwargs)
