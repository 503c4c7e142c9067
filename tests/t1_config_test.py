import unittest

from queryopts import EntityConfig, EntityConfigRegistry, register_default_configs
from queryopts import ModelPropertyBags, entity_type_for
from queryopts.exc import RegistryFrozenError

from . import models


class EntityConfigRegistryTest(unittest.TestCase):
    """ Test the entity configuration registry """

    def test_entity_config(self):
        config = EntityConfig(
            searchable_columns=['name', 'email'],
            sortable_columns=['name'],
        )

        # Lists are stored as tuples
        self.assertEqual(config.searchable_columns, ('name', 'email'))
        self.assertEqual(config.sortable_columns, ('name',))
        self.assertEqual(config.default_sort, ())
        self.assertEqual(config.default_includes, ())

        # No restrictions by default
        self.assertIsNone(config.filterable_columns)
        self.assertIsNone(config.preloadable_relations)

        # Equality
        self.assertEqual(config, EntityConfig(searchable_columns=('name', 'email'), sortable_columns=('name',)))
        self.assertNotEqual(config, EntityConfig())

        # No new attributes
        with self.assertRaises(AttributeError):
            config.whatever = 1

    def test_register_and_get(self):
        registry = EntityConfigRegistry()
        user_config = EntityConfig(searchable_columns=('name',), sortable_columns=('name', 'created_at'))

        # === Test: empty
        self.assertIsNone(registry.get_config('user'))
        self.assertEqual(len(registry), 0)
        self.assertNotIn('user', registry)

        # === Test: register
        self.assertIs(registry.register_config('user', user_config), registry)
        self.assertIs(registry.get_config('user'), user_config)
        self.assertIn('user', registry)
        self.assertEqual(registry.entity_types, {'user'})

        # === Test: the last one wins, no merging
        other_config = EntityConfig(sortable_columns=('email',))
        registry.register_config('user', other_config)
        self.assertIs(registry.get_config('user'), other_config)
        self.assertEqual(registry.get_config('user').searchable_columns, ())
        self.assertEqual(len(registry), 1)

        # === Test: invalid keys
        with self.assertRaises(ValueError):
            registry.register_config('', user_config)
        with self.assertRaises(ValueError):
            registry.register_config(None, user_config)

    def test_is_valid_column(self):
        registry = EntityConfigRegistry()
        registry.register_config('user', EntityConfig(
            searchable_columns=('name', 'email'),
            sortable_columns=('name', 'created_at'),
        ))

        # Sort
        self.assertTrue(registry.is_valid_sort_column('user', 'name'))
        self.assertTrue(registry.is_valid_sort_column('user', 'created_at'))
        self.assertFalse(registry.is_valid_sort_column('user', 'email'))
        self.assertFalse(registry.is_valid_sort_column('user', 'name; DROP TABLE users'))

        # Search
        self.assertTrue(registry.is_valid_search_column('user', 'name'))
        self.assertTrue(registry.is_valid_search_column('user', 'email'))
        self.assertFalse(registry.is_valid_search_column('user', 'created_at'))

        # Unknown entity type: nothing is allowed
        for column in ('name', 'email', 'created_at', 'id', ''):
            self.assertFalse(registry.is_valid_sort_column('ghost', column))
            self.assertFalse(registry.is_valid_search_column('ghost', column))

    def test_freeze(self):
        registry = EntityConfigRegistry()
        registry.register_config('user', EntityConfig())
        self.assertFalse(registry.is_frozen)

        registry.freeze()
        self.assertTrue(registry.is_frozen)

        # Writes are not allowed anymore
        with self.assertRaises(RegistryFrozenError) as e:
            registry.register_config('article', EntityConfig())
        self.assertEqual(e.exception.entity_type, 'article')
        self.assertNotIn('article', registry)

        # Reads are
        self.assertEqual(registry.get_config('user'), EntityConfig())

    def test_register_default_configs(self):
        registry = register_default_configs(EntityConfigRegistry())

        config = registry.get_config('base_model')
        self.assertEqual(config.sortable_columns, ('id', 'created_at', 'updated_at'))
        self.assertEqual(config.searchable_columns, ('id', 'created_at', 'updated_at'))
        self.assertEqual(config.default_sort, ('created_at',))
        self.assertTrue(registry.is_valid_sort_column('base_model', 'updated_at'))


class BagsTest(unittest.TestCase):
    """ Test model property bags """

    def test_user_bags(self):
        bags = ModelPropertyBags.for_model(models.User)

        # Cached
        self.assertIs(bags, ModelPropertyBags.for_model(models.User))

        self.assertEqual(bags.model, models.User)
        self.assertEqual(bags.model_name, 'User')

        # Columns
        self.assertEqual(bags.columns.names, {'id', 'name', 'email', 'phone', 'age', 'is_active', 'role_id',
                                              'created_at', 'updated_at', 'deleted_at'})
        self.assertIn('name', bags.columns)
        self.assertNotIn('role', bags.columns)
        self.assertIs(bags.columns['name'], models.User.name)
        self.assertIsNone(bags.columns.get('nope'))
        self.assertEqual(bags.columns.get_invalid_names(['name', 'nope']), {'nope'})

        # Column types
        self.assertIs(bags.columns.get_python_type('age'), int)
        self.assertIs(bags.columns.get_python_type('is_active'), bool)
        self.assertIs(bags.columns.get_python_type('name'), str)

        # Relations
        self.assertEqual(bags.relations.names, {'role', 'articles'})
        self.assertIs(bags.relations.get_target_model('articles'), models.Article)
        self.assertEqual(bags.all_names, bags.columns.names | bags.relations.names)

    def test_entity_type_for(self):
        self.assertEqual(entity_type_for(models.User), 'user')
        self.assertEqual(entity_type_for(models.Article), 'article')
        self.assertEqual(entity_type_for(models.Tag), 'label')  # __entity_type__

        self.assertEqual(models.User.entity_type(), 'user')
        self.assertEqual(models.Tag.entity_type(), 'label')
