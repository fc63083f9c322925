import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import collage_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


# Common test fixtures
@pytest.fixture
def make_image(tmp_path: Path):
    """Return a factory that writes a solid-colour test image."""

    def _make(name: str = "sample.png", size=(200, 100), color="red", mode="RGB") -> Path:
        img = Image.new(mode, size, color=color)
        img_path = tmp_path / name
        img.save(img_path)
        return img_path

    return _make


@pytest.fixture
def sample_image(make_image):
    """Create a simple 200x100 test image."""
    return make_image()


@pytest.fixture
def registry():
    """The built-in component registry."""
    from collage_toolkit.builder.registry import default_registry

    return default_registry()


@pytest.fixture
def registered_params(registry):
    """ParameterSet after the registration phase of every built-in component."""
    from collage_toolkit.builder.parameters import ParameterSet

    params = ParameterSet()
    with params.registration():
        for component in registry:
            component.register_custom_parameters(params)
    return params


@pytest.fixture
def truncated_image(tmp_path: Path) -> Path:
    """A PNG cut off halfway through its pixel data; the header still parses."""
    full_path = tmp_path / "full.png"
    Image.effect_noise((64, 64), 64).convert("RGB").save(full_path)
    data = full_path.read_bytes()
    img_path = tmp_path / "truncated.png"
    img_path.write_bytes(data[: len(data) // 2])
    return img_path
