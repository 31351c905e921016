from typing import ClassVar


class Defaults:
    MODEL = "SDTM"
    CT_DIR = "docs/Controlled_Terminology"
    CONFIG_FILE = "define_engine.toml"


class Models:
    SDTM = "SDTM"
    SEND = "SEND"
    ADAM = "ADaM"
    SUPPORTED: ClassVar[tuple[str, ...]] = ("SDTM", "SEND", "ADaM")


class DatasetPurposes:
    TABULATION = "Tabulation"
    ANALYSIS = "Analysis"


class OriginTypes:
    BY_MODEL: ClassVar[dict[str, tuple[str, ...]]] = {
        "SDTM": ("CRF", "Derived", "Assigned", "Protocol", "eDT", "Predecessor"),
        "SEND": ("CRF", "Derived", "Assigned", "Protocol", "eDT", "Predecessor"),
        "ADaM": ("Derived", "Assigned", "Predecessor"),
    }


class AliasContexts:
    NCI_CODE = "nci:ExtCodeID"


class Flags:
    YES = "Yes"
    NO = "No"
    EXTENDED_VALUE = "Y"


class OidPrefixes:
    ITEM_GROUP = "IG."
    ITEM_DEF = "IT."
    ITEM_REF = "IR."
    CODE_LIST = "CL."
    CODE_LIST_ITEM = "CI."
    LEAF = "LF."
    STANDARD = "STD."
