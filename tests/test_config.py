"""
Test atlas configuration validation
"""
import pytest
from pydantic import ValidationError

from atlaspack import AtlasConfig


class TestAtlasConfig:
    """Test defaults and rejected values"""

    def test_defaults(self):
        config = AtlasConfig()
        assert config.atlas_size == 4096
        assert config.expand == 0
        assert config.border == 0
        assert config.utilization == 0.85
        assert config.min_images == 3
        assert config.unique is False

    def test_padding(self):
        assert AtlasConfig(expand=2, border=3).padding == 7

    @pytest.mark.parametrize("kwargs", [
        {"atlas_size": 0},
        {"expand": -1},
        {"border": -2},
        {"utilization": 0.0},
        {"utilization": 1.5},
        {"atlas_size": 8, "expand": 4},
        {"colour": "red"},
    ])
    def test_rejects_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            AtlasConfig(**kwargs)

    def test_frozen(self):
        config = AtlasConfig()
        with pytest.raises(ValidationError):
            config.atlas_size = 16
