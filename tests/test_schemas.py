from pitch_panda.schemas import Core, Figure, Provenance, RiskItem, Slide


def test_slide_type_normalized():
    assert Slide(page=1, slide_type=" Team ").slide_type == "team"
    assert Slide(page=1, slide_type="appendix").slide_type == "other"
    assert Slide(page=1, slide_type=None).slide_type == "other"


def test_numeric_values_become_strings():
    assert Figure(label="Users", value=10000).value == "10000"


def test_risk_severity_normalized():
    assert RiskItem(category="market", description="x", severity="HIGH").severity == "high"
    assert RiskItem(category="market", description="x", severity="severe").severity is None


def test_provenance_labels():
    assert Provenance(kind="deck_slide", page=4).label() == "Slide 4"
    assert Provenance(kind="extra_context").label() == "Private context"
    assert Provenance(kind="website", location="/about").label() == "/about"
    assert Provenance(kind="website").label() == "/"


def test_sparse_core_output_validates():
    core = Core.model_validate(
        {"problem": {"one_liner": "p"}, "solution": {"one_liner": "s"}, "value_proposition": {"summary": "v"}}
    )
    assert core.market.tam is None
    assert core.product_type == "Unknown"
    assert core.active_locations == []
