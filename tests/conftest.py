from collections.abc import Callable, Mapping

import pytest

from define_engine.constants import AliasContexts, Flags
from define_engine.domain.entities import (
    Alias,
    CodeList,
    CodeListItem,
    CodeListSources,
    ControlledTerminology,
    DecodedItems,
    EnumeratedItem,
    EnumeratedItems,
    ItemDef,
    ItemDefSources,
    ItemGroup,
    ItemRef,
    Leaf,
    MetaDataVersion,
    Origin,
    StandardCodeList,
    StandardCodeListItem,
    TranslatedText,
)

SDTM_CT_OID = "STD.CT.SDTM"


def nci(code: str) -> Alias:
    return Alias(name=code, context=AliasContexts.NCI_CODE)


type CodeListFactory = Callable[..., CodeList]


@pytest.fixture
def make_code_list() -> CodeListFactory:
    """Build a codelist from ``{item_oid: coded_value}`` pairs."""

    def _make(
        oid: str,
        name: str | None = None,
        values: Mapping[str, str] | None = None,
        *,
        enumerated: bool = False,
        **fields: object,
    ) -> CodeList:
        values = values or {}
        items: DecodedItems | EnumeratedItems
        if enumerated:
            items = EnumeratedItems(
                items={
                    item_oid: EnumeratedItem(coded_value=value)
                    for item_oid, value in values.items()
                }
            )
        else:
            items = DecodedItems(
                items={
                    item_oid: CodeListItem(
                        coded_value=value, decode=TranslatedText(value=value.title())
                    )
                    for item_oid, value in values.items()
                }
            )
        return CodeList(
            oid=oid,
            name=name or oid,
            items=items,
            item_order=tuple(values),
            **fields,  # type: ignore[arg-type]
        )

    return _make


@pytest.fixture
def sex_standard() -> StandardCodeList:
    return StandardCodeList(
        oid="CL.C66731",
        name="Sex",
        codelist_code="C66731",
        submission_value="SEX",
        extensible=False,
        items=(
            StandardCodeListItem(coded_value="F", alias=nci("C16576"), decode="Female"),
            StandardCodeListItem(coded_value="M", alias=nci("C20197"), decode="Male"),
            StandardCodeListItem(
                coded_value="UNDIFFERENTIATED", alias=nci("C45908"), decode="Intersex"
            ),
        ),
    )


@pytest.fixture
def route_standard() -> StandardCodeList:
    return StandardCodeList(
        oid="CL.C66729",
        name="Route of Administration Response",
        codelist_code="C66729",
        submission_value="ROUTE",
        extensible=True,
        items=(
            StandardCodeListItem(coded_value="ORAL", alias=nci("C38288")),
            StandardCodeListItem(coded_value="TOPICAL", alias=nci("C38304")),
        ),
    )


@pytest.fixture
def standards(
    sex_standard: StandardCodeList, route_standard: StandardCodeList
) -> dict[str, ControlledTerminology]:
    return {
        SDTM_CT_OID: ControlledTerminology(
            oid=SDTM_CT_OID,
            name="SDTM CT 2023-12-15",
            version="2023-12-15",
            code_lists={"C66731": sex_standard, "C66729": route_standard},
        )
    }


@pytest.fixture
def sex_code_list() -> CodeList:
    return CodeList(
        oid="CL.SEX",
        name="Sex",
        items=DecodedItems(
            items={
                "CI.1": CodeListItem(
                    coded_value="M",
                    decode=TranslatedText(value="Male"),
                    alias=nci("C20197"),
                ),
                "CI.2": CodeListItem(
                    coded_value="F",
                    decode=TranslatedText(value="Female"),
                    alias=nci("C16576"),
                ),
            }
        ),
        item_order=("CI.1", "CI.2"),
        standard_oid=SDTM_CT_OID,
        cdisc_submission_value="SEX",
        alias=nci("C66731"),
        sources=CodeListSources(item_defs=("IT.DM.SEX",)),
    )


@pytest.fixture
def metadata(sex_code_list: CodeList) -> MetaDataVersion:
    """An SDTM metadata version with DM (AGE, SEX) and the SEX codelist."""
    item_defs = {
        "IT.DM.AGE": ItemDef(
            oid="IT.DM.AGE",
            name="AGE",
            data_type="integer",
            length=3,
            description=TranslatedText(value="Age"),
            origin=Origin(type="CRF"),
            sources=ItemDefSources(item_groups=("IG.DM",)),
        ),
        "IT.DM.SEX": ItemDef(
            oid="IT.DM.SEX",
            name="SEX",
            length=1,
            description=TranslatedText(value="Sex"),
            origin=Origin(type="CRF"),
            code_list_oid="CL.SEX",
            sources=ItemDefSources(item_groups=("IG.DM",)),
        ),
    }
    item_refs = {
        "IR.DM.AGE": ItemRef(
            oid="IR.DM.AGE", item_oid="IT.DM.AGE", order_number=1, mandatory=Flags.NO
        ),
        "IR.DM.SEX": ItemRef(
            oid="IR.DM.SEX", item_oid="IT.DM.SEX", order_number=2, mandatory=Flags.YES
        ),
    }
    dm = ItemGroup(
        oid="IG.DM",
        name="DM",
        dataset_name="DM",
        description=TranslatedText(value="Demographics"),
        leaf=Leaf(id="LF.DM", href="dm.xpt", title="dm.xpt"),
        item_refs=item_refs,
        item_ref_order=("IR.DM.AGE", "IR.DM.SEX"),
    )
    return MetaDataVersion(
        model="SDTM",
        item_groups={"IG.DM": dm},
        item_defs=item_defs,
        code_lists={"CL.SEX": sex_code_list},
        item_group_order=("IG.DM",),
        code_list_order=("CL.SEX",),
    )
