import pytest

from farm.crop_catalog import CROP_CATALOG, CropId, crops_for_season, get_crop_config, parse_crop_id
from farm.errors import InvalidCropType


def test_catalog_covers_every_crop():
    assert list(CROP_CATALOG) == list(CropId)
    assert get_crop_config(3).base_yield == 500


@pytest.mark.parametrize("raw, expected", [(1, CropId.WHEAT), ("5", CropId.LETTUCE), (" Corn ", CropId.CORN)])
def test_parse_crop_id(raw, expected):
    assert parse_crop_id(raw) is expected


@pytest.mark.parametrize("raw", [0, 6, "rice", None, True])
def test_parse_crop_id_rejects(raw):
    with pytest.raises(InvalidCropType):
        parse_crop_id(raw)


def test_crops_for_season():
    """Winter allows wheat and carrots only; summer allows everything."""
    assert crops_for_season(3) == [CropId.WHEAT, CropId.CARROT]
    assert crops_for_season(1) == list(CropId)
    assert crops_for_season(2) == [CropId.CARROT, CropId.LETTUCE]


def test_maturity_and_growth_stages():
    wheat = CROP_CATALOG[CropId.WHEAT]
    assert not wheat.is_mature(100, 129)
    assert wheat.is_mature(100, 130)
    assert wheat.growth_stage(100, 100) == 0
    assert wheat.growth_stage(100, 115) == 1
    assert wheat.growth_stage(100, 129) == 2
    assert wheat.growth_stage(100, 500) == 3
