import os

import pytest
from pydantic import ValidationError

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from dealersite.schemas.dealer_config import DealerConfig, DealerConfigPatch, MenuItem


def test_defaults_serialize_with_camel_case_keys():
    payload = DealerConfig().to_payload()
    assert payload["theme"] == {
        "key": "base",
        "colors": {"primary": "#3b82f6", "secondary": "#64748b", "accent": "#f59e0b"},
        "typography": {"headingFont": "Inter", "bodyFont": "Inter"},
        "spacing": {"containerWidth": "1280px", "sectionPadding": "4rem"},
    }
    assert payload["sections"] == {
        "showHero": True,
        "showFeatures": True,
        "showFooter": True,
        "showInventoryLink": True,
        "showTestimonials": False,
        "showGallery": False,
        "showContactForm": True,
    }
    assert payload["menu"] == []
    assert payload["tokens"]["borderRadius"] == "8px"


def test_payload_round_trips():
    config = DealerConfig.model_validate(
        {
            "theme": {"key": "t1"},
            "menu": [
                {
                    "id": "inv",
                    "label": "Inventory",
                    "href": "/inventory",
                    "target": "_blank",
                    "children": [{"id": "new", "label": "New", "order": 1}],
                }
            ],
        }
    )
    assert DealerConfig.model_validate(config.to_payload()) == config
    assert config.menu[0].children[0].target == "_self"


def test_sections_are_strict_booleans():
    with pytest.raises(ValidationError):
        DealerConfig.model_validate({"sections": {"showHero": "yes"}})
    with pytest.raises(ValidationError):
        DealerConfig.model_validate({"sections": {"showGallery": 1}})


def test_menu_item_target_and_required_fields():
    with pytest.raises(ValidationError):
        MenuItem.model_validate({"id": "a", "label": "A", "target": "_new"})
    with pytest.raises(ValidationError):
        MenuItem.model_validate({"id": "a"})
    with pytest.raises(ValidationError):
        MenuItem.model_validate({"id": " ", "label": "A"})


def test_patch_keeps_only_provided_known_fields():
    patch = DealerConfigPatch.model_validate(
        {"theme": {"colors": {"primary": "#000000"}}, "sections": {"showHero": None}, "extra": {"x": 1}}
    )
    assert patch.to_payload() == {"theme": {"colors": {"primary": "#000000"}}, "sections": {}}


def test_patch_rejects_wrong_types():
    with pytest.raises(ValidationError):
        DealerConfigPatch.model_validate({"sections": {"showHero": "true"}})
    with pytest.raises(ValidationError):
        DealerConfigPatch.model_validate({"menu": [{"label": "No id"}]})
