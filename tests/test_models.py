import pytest

from models import (
    NATION_RESOURCES,
    UNIT_TEMPLATES,
    Hex,
    ResourcePool,
    capital_template_for,
    create_unit,
    nation_name,
    primary_resource,
)


class TestResourcePool:

    def test_defaults_to_zero(self):
        assert ResourcePool().to_dict() == {'faith': 0, 'chaos': 0, 'gold': 0, 'magic': 0, 'blood': 0}

    def test_add_returns_new_pool(self):
        pool = ResourcePool(faith=2)
        richer = pool.add('faith', 3)
        assert richer.faith == 5
        assert pool.faith == 2
        assert richer.total() == 5

    def test_unknown_kind(self):
        with pytest.raises(KeyError):
            ResourcePool().get('mana')


class TestNations:

    def test_primary_resource(self):
        assert primary_resource('altaria') == 'faith'
        assert primary_resource('cartasia') == 'blood'
        assert primary_resource('black_council') == 'blood'
        assert primary_resource('atlantis') is None

    def test_every_nation_has_a_resource(self):
        assert len(NATION_RESOURCES) == 10
        assert all(kinds for kinds in NATION_RESOURCES.values())

    def test_display_names(self):
        assert nation_name('celestial_empire') == 'Celestial Empire'
        assert nation_name('sky_pirates') == 'Sky Pirates'


class TestUnitTemplates:

    def test_capitals(self):
        for key in ('altaria_capital', 'cartasia_capital'):
            capital = UNIT_TEMPLATES[key]
            assert capital.is_capital
            assert capital.movement == 0
            assert capital.max_hit_points == 15

    def test_capital_template_for(self):
        assert capital_template_for('altaria') == 'altaria_capital'
        assert capital_template_for('void') is None

    def test_create_unit_returns_copy(self):
        unit = create_unit('altaria_infantry')
        unit.hit_points = 1
        unit.abilities.append('extra')
        template = UNIT_TEMPLATES['altaria_infantry']
        assert template.hit_points == 3
        assert template.abilities == ['divine_shield']

    def test_unknown_template(self):
        with pytest.raises(KeyError):
            create_unit('dragon')

    def test_alive(self):
        unit = create_unit('altaria_infantry')
        unit.hit_points = 1
        assert unit.alive
        unit.hit_points = 0
        assert not unit.alive


def test_hex_to_dict():
    data = Hex(q=1, r=-1, s=0, terrain='river').to_dict()
    assert data == {
        'id': '1,-1,0', 'q': 1, 'r': -1, 's': 0, 'terrain': 'river',
        'owner': 'neutral', 'unit': None, 'building': None,
    }
