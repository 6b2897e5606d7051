import pytest
from pathlib import Path

import media_organizer.metadata.extract as extract_module
from media_organizer.models import OrganizerOptions


class FakeTrack:
    def __init__(self, track_type="General", **kwargs):
        self.track_type = track_type
        for k, v in kwargs.items():
            setattr(self, k, v)


@pytest.fixture
def exif_tags(monkeypatch):
    """
    Maps file name -> exifread-style tag dict. Files not registered
    behave like images without an EXIF block.
    """
    registry = {}

    def fake_process_file(fh, details=True, **kwargs):
        return dict(registry.get(Path(fh.name).name, {}))

    monkeypatch.setattr(extract_module.exifread, "process_file", fake_process_file)
    return registry


@pytest.fixture
def media_info(monkeypatch):
    """
    Maps file name -> General track encoded_date. Register an exception
    instance to make MediaInfo.parse blow up for that file.
    """
    registry = {}

    class FakeMediaInfo:
        def __init__(self, tracks):
            self.tracks = tracks

        @classmethod
        def parse(cls, path):
            value = registry.get(Path(path).name)
            if isinstance(value, Exception):
                raise value
            return cls([FakeTrack("General", encoded_date=value), FakeTrack("Video")])

    monkeypatch.setattr(extract_module, "MediaInfo", FakeMediaInfo)
    return registry


@pytest.fixture
def dest_root(tmp_path):
    return tmp_path / "dest"


@pytest.fixture
def src_root(tmp_path):
    root = tmp_path / "src"
    root.mkdir()
    return root


@pytest.fixture
def options(dest_root):
    return OrganizerOptions(destination_root=dest_root, enable_camera_grouping=False)
