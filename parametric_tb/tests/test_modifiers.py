"""
Test Element Modifiers
======================
"""

import numpy as np
import pytest


class TestModifierKinds:
    """Test arity detection."""

    def test_onsite_kinds(self):
        from parametric_tb import onsite_modifier, ModifierKind

        assert onsite_modifier(lambda o: o).kind is ModifierKind.UNIFORM
        assert onsite_modifier(lambda o, r: o).kind is ModifierKind.ONSITE

    def test_hopping_kinds(self):
        from parametric_tb import hopping_modifier, ModifierKind

        assert hopping_modifier(lambda t: t).kind is ModifierKind.UNIFORM
        assert hopping_modifier(lambda t, r, dr: t).kind is ModifierKind.HOPPING

    def test_bad_arity(self):
        from parametric_tb import onsite_modifier, hopping_modifier

        with pytest.raises(ValueError):
            onsite_modifier(lambda o, r, dr: o)
        with pytest.raises(ValueError):
            hopping_modifier(lambda t, r: t)
        with pytest.raises(ValueError):
            hopping_modifier(lambda *args: args[0])


class TestParameters:
    """Test declared parameters and binding."""

    def test_declared_parameters(self):
        from parametric_tb import hopping_modifier

        m = hopping_modifier(lambda t, r, dr, *, B, phase=0.0: t)
        assert m.parameters == ('B', 'phase')
        assert m.required == frozenset({'B'})
        assert not m.onsite

    def test_bind_filters_unknown_names(self):
        from parametric_tb import onsite_modifier

        m = onsite_modifier(lambda o, *, mu: o - mu)
        assert m.bind({'mu': 1.0, 'other': 5}) == {'mu': 1.0}

    def test_bind_missing(self):
        from parametric_tb import onsite_modifier, MissingParameterError

        m = onsite_modifier(lambda o, *, mu: o - mu)
        with pytest.raises(MissingParameterError) as info:
            m.bind({})
        assert info.value.missing == ('mu',)
        assert info.value.modifier is m
        assert isinstance(info.value, TypeError)

    def test_defaults_may_be_omitted(self):
        from parametric_tb import onsite_modifier

        m = onsite_modifier(lambda o, *, mu=0.5: o - mu)
        assert m.bind({}) == {}
        assert m(2.0) == 1.5

    def test_var_keyword_receives_everything(self):
        from parametric_tb import onsite_modifier

        m = onsite_modifier(lambda o, **kw: o + sum(kw.values()))
        assert m.takes_any
        assert m.bind({'a': 1, 'b': 2}) == {'a': 1, 'b': 2}

    def test_merge_parameters(self):
        from parametric_tb import onsite_modifier, hopping_modifier
        from parametric_tb.core import merge_parameters

        mods = [onsite_modifier(lambda o, *, mu: o),
                onsite_modifier(lambda o, r, *, mu, B: o),
                hopping_modifier(lambda t, *, t0: t)]
        assert merge_parameters(mods) == ('mu', 'B', 't0')


class TestResolution:
    """Test selector resolution through modifiers."""

    def test_resolve(self):
        from parametric_tb import create_honeycomb, onsite_modifier

        lat = create_honeycomb()
        m = onsite_modifier(lambda o: o, sublats='A')
        assert not m.is_resolved
        rm = m.resolve(lat)
        assert rm.is_resolved
        assert rm.resolve(lat) is rm
        assert not m.is_resolved

    def test_resolved_against_other_lattice(self):
        from parametric_tb import create_honeycomb, onsite_modifier

        m = onsite_modifier(lambda o: o).resolve(create_honeycomb())
        with pytest.raises(ValueError):
            m.resolve(create_honeycomb())
