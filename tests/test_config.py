from route_reader.config import ReaderConfig, load_config


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")
        assert config == ReaderConfig()
        assert load_config(None) == ReaderConfig()

    def test_empty_file(self, tmp_path):
        f = tmp_path / "reader.yaml"
        f.write_text("")
        assert load_config(f).default_response_description == "default response"

    def test_overrides(self, tmp_path):
        f = tmp_path / "reader.yaml"
        f.write_text("title: Pet Store\ndefault_media_type: application/xml\n")
        config = load_config(f)
        assert config.title == "Pet Store"
        assert config.default_media_type == "application/xml"
        assert config.wildcard_media_type == "*/*"
