from .inspect import get_function_defaults


class QueryBuilderSettingsHandler:
    """ Settings keeper for QueryBuilder

        This is essentially a helper which will feed the correct kwargs to every handler class.

        Handlers receive settings as kwargs to their __init__() methods,
        and those kwargs have unique names.

        This class will collect all settings as a single, flat dict,
        and give each handler only the settings it wants.
    """

    def __init__(self, settings: dict):
        """ Store the settings for every handler

            :param settings: dict of handler kwargs
        """
        assert isinstance(settings, dict)

        #: Settings dict
        self._settings = settings  # we don't make a copy, because we don't modify it

        #: all kwargs names (to identify invalid ones)
        self._all_known_kwargs_names = set()

    def get_settings(self, handler_name: str, handler_cls: type) -> dict:
        """ Get settings for the given handler

            Every time a class is given us, we analyze its __init__() method in order to know its kwargs
            and their default values. Then, we take the matching keys from the settings dict,
            take defaults from the argument defaults, and make it all into `kwargs` for the class.
        """
        # Analyze its __init__() method's kwargs
        defaults = get_function_defaults(handler_cls.__init__)

        # Remember the names: for validation
        self._all_known_kwargs_names.update(defaults)

        # Get the values for these kwargs
        return {k: self._settings.get(k, default)
                for k, default in defaults.items()}

    def raise_if_invalid_handler_settings(self, builder):
        """ Check whether there were any typos in setting names

            After all handlers were initialized, we've had a chance to analyze all their keyword arguments.
            Now, we can check whether every provided setting was actually used.
            If not, there must be a typo.

            :raises: KeyError: Invalid settings provided
        """
        invalid_keys = set(self._settings.keys()) - self._all_known_kwargs_names
        if invalid_keys:
            raise KeyError('Invalid settings were provided for {!r}: {}'
                           .format(builder, ','.join(sorted(invalid_keys))))

    def __repr__(self):
        return repr('{}({})'.format(self.__class__.__name__, self._settings))
