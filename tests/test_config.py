"""
Unit tests for distribvc.config module
"""
import json
import logging
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import yaml

from distribvc.config import (
    RepositoryLayout,
    apply_env_overrides,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
    save_config,
    setup_logging,
)


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.original_home = os.environ.get('HOME')
        os.environ['HOME'] = self.temp_dir
        self.config_dir = Path(self.temp_dir) / '.distribvc'

    def tearDown(self):
        """Clean up test environment"""
        if self.original_home:
            os.environ['HOME'] = self.original_home
        else:
            del os.environ['HOME']
        shutil.rmtree(self.temp_dir)

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        self.assertIn('general', config)
        self.assertIn('layout', config)
        self.assertIn('ignore', config)
        self.assertIn('logging', config)
        self.assertEqual(config['general']['default_branch'], 'master')
        self.assertEqual(config['layout']['repo_dir'], '.distribvc')
        self.assertEqual(config['ignore']['default_patterns'], ['*.log', '.DS_Store'])

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        self.assertEqual(load_config(), get_default_config())

    def test_default_config_path(self):
        self.assertEqual(get_config_path(), self.config_dir / 'config.json')

    def test_load_json_config(self):
        self.config_dir.mkdir()
        (self.config_dir / 'config.json').write_text(json.dumps({'general': {'author': 'alice'}}))

        config = load_config()

        self.assertEqual(config['general']['author'], 'alice')
        self.assertEqual(config['general']['default_branch'], 'master')

    def test_load_yaml_config(self):
        self.config_dir.mkdir()
        with open(self.config_dir / 'config.yaml', 'w') as f:
            yaml.safe_dump({'layout': {'repo_dir': '.vc'}, 'logging': {'level': 'DEBUG'}}, f)

        config = load_config()

        self.assertEqual(config['layout']['repo_dir'], '.vc')
        self.assertEqual(config['layout']['commits_dir'], 'commits')
        self.assertEqual(config['logging']['level'], 'DEBUG')

    def test_load_toml_config(self):
        self.config_dir.mkdir()
        (self.config_dir / 'config.toml').write_text('[general]\nauthor = "bob"\n')
        self.assertEqual(load_config()['general']['author'], 'bob')

    def test_config_env_variable(self):
        custom = Path(self.temp_dir) / 'custom.yml'
        custom.write_text('general:\n  default_branch: main\n')
        with patch.dict(os.environ, {'DISTRIBVC_CONFIG': str(custom)}):
            self.assertEqual(get_config_path(), custom)
            self.assertEqual(load_config()['general']['default_branch'], 'main')

    def test_invalid_config_falls_back_to_defaults(self):
        self.config_dir.mkdir()
        (self.config_dir / 'config.json').write_text('{broken')
        with self.assertLogs('distribvc', level='ERROR'):
            config = load_config()
        self.assertEqual(config, get_default_config())

    def test_non_mapping_config_is_ignored(self):
        self.config_dir.mkdir()
        (self.config_dir / 'config.yaml').write_text('- just\n- a list\n')
        with self.assertLogs('distribvc', level='WARNING'):
            config = load_config()
        self.assertEqual(config, get_default_config())

    def test_save_and_reload(self):
        config = get_default_config()
        config['general']['author'] = 'carol'
        path = save_config(config)

        self.assertEqual(path, self.config_dir / 'config.json')
        self.assertEqual(load_config()['general']['author'], 'carol')

    def test_save_toml_writes_json(self):
        path = save_config(get_default_config(), self.config_dir / 'config.toml')
        self.assertEqual(path.suffix, '.json')
        self.assertTrue(path.exists())

    def test_save_yaml(self):
        path = save_config({'general': {'author': 'dan'}}, self.config_dir / 'config.yaml')
        with open(path) as f:
            self.assertEqual(yaml.safe_load(f), {'general': {'author': 'dan'}})


class TestMergeAndOverrides(unittest.TestCase):

    def test_merge_is_recursive(self):
        base = {'a': {'x': 1, 'y': 2}, 'b': 1}
        merged = merge_configs(base, {'a': {'y': 3}, 'c': 4})
        self.assertEqual(merged, {'a': {'x': 1, 'y': 3}, 'b': 1, 'c': 4})
        self.assertEqual(base['b'], 1)

    def test_env_override_nested_key(self):
        config = get_default_config()
        env = {
            'DISTRIBVC_GENERAL_AUTHOR': 'erin',
            'DISTRIBVC_GENERAL_DEFAULT_BRANCH': 'trunk',
            'DISTRIBVC_LAYOUT_REPO_DIR': '.vcs',
            'DISTRIBVC_LOGGING_LEVEL': 'DEBUG',
        }
        with patch.dict(os.environ, env):
            config = apply_env_overrides(config)
        self.assertEqual(config['general']['author'], 'erin')
        self.assertEqual(config['general']['default_branch'], 'trunk')
        self.assertEqual(config['layout']['repo_dir'], '.vcs')
        self.assertEqual(config['logging']['level'], 'DEBUG')

    def test_env_unknown_key_ignored(self):
        config = get_default_config()
        with patch.dict(os.environ, {'DISTRIBVC_NOPE_THING': 'x'}):
            self.assertEqual(apply_env_overrides(config), get_default_config())


class TestRepositoryLayout(unittest.TestCase):

    def test_defaults(self):
        layout = RepositoryLayout()
        self.assertEqual(layout.repo_dir, '.distribvc')
        self.assertEqual(layout.ignore_file, '.distribvcignore')
        self.assertEqual(layout.default_branch, 'master')

    def test_from_default_config(self):
        self.assertEqual(RepositoryLayout.from_config(get_default_config()), RepositoryLayout())

    def test_from_config(self):
        config = get_default_config()
        config['layout']['repo_dir'] = '.vc'
        config['layout']['unknown'] = 'ignored'
        config['general']['default_branch'] = 'main'
        config['ignore']['default_patterns'] = ['*.tmp']

        layout = RepositoryLayout.from_config(config)

        self.assertEqual(layout.repo_dir, '.vc')
        self.assertEqual(layout.default_branch, 'main')
        self.assertEqual(layout.default_ignore_patterns, ('*.tmp',))

    def test_from_empty_config(self):
        self.assertEqual(RepositoryLayout.from_config(None), RepositoryLayout())


class TestSetupLogging(unittest.TestCase):

    def test_single_handler_and_level(self):
        logger = logging.getLogger('distribvc')
        setup_logging('INFO')
        setup_logging('DEBUG')
        own = [h for h in logger.handlers if type(h).__name__ == '_StderrHandler']
        self.assertEqual(len(own), 1)
        self.assertEqual(logger.level, logging.DEBUG)
        setup_logging('WARNING')


if __name__ == '__main__':
    unittest.main()
