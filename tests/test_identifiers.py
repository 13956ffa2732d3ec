"""Tests for product identifier derivation."""

import pytest

from storefront_catalog.services.identifiers import MAX_ID_LENGTH, derive_product_id


class TestDeriveProductId:
    """Test derive_product_id normalization rules."""

    @pytest.mark.parametrize(
        "nombre, expected",
        [
            ("Válvula Ñ 1", "valvula-n-1"),
            ("Filtro X", "filtro-x"),
            ("  Bomba -- PG/20  ", "bomba-pg-20"),
            ("Manguera R2 3/8\"", "manguera-r2-3-8"),
            ("Kit de componentes REXROTH", "kit-de-componentes-rexroth"),
            ("ÀÉÎÕÜ ç", "aeiou-c"),
        ],
    )
    def test_examples(self, nombre, expected):
        assert derive_product_id(nombre) == expected

    def test_no_alphanumerics_yields_empty_string(self):
        assert derive_product_id("¿¡ !?") == ""
        assert derive_product_id("") == ""

    def test_truncated_to_max_length(self):
        product_id = derive_product_id("a" * 150)

        assert len(product_id) == MAX_ID_LENGTH

    def test_truncation_does_not_leave_trailing_hyphen(self):
        nombre = "a" * 99 + " b"

        product_id = derive_product_id(nombre)

        assert product_id == "a" * 99
        assert not product_id.endswith("-")

    @pytest.mark.parametrize(
        "nombre",
        ["Válvula Ñ 1", "---x---", "a" * 99 + " bcd", "Ωmega ß 12", "MOTOR orbital (OMR) 160", "-"],
    )
    def test_idempotent(self, nombre):
        once = derive_product_id(nombre)

        assert derive_product_id(once) == once

    def test_deterministic(self):
        assert derive_product_id("Cilindro 63x400") == derive_product_id("Cilindro 63x400")
