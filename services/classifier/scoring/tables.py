"""
Classifier Tables
=================
Fixed scoring tables: variable scales, group membership, tier metadata
and the default snapshot used for "reset".
"""

from typing import Dict, List

from .models import (
    GroupKey,
    TierCode,
    Tier,
    LinearScale,
    CategoryTable,
    MultiSelectScale,
    VariableDefinition,
    ClassifierInput,
    GroupWeights,
    VarWeights,
    Thresholds,
    ClassifierRequest,
)

# Score for a key that has no definition at all
NEUTRAL_SCORE = 50.0


GROUP_TITLES: Dict[GroupKey, str] = {
    GroupKey.OPERATIONEEL: "Operationeel",
    GroupKey.TECHNISCH: "Technisch",
    GroupKey.CONFIGURATIE: "Configuratie",
    GroupKey.ORGANISATIE: "Organisatie",
    GroupKey.PROCESSEN: "Processen",
    GroupKey.RAPPORTAGE: "Rapportage",
    GroupKey.CONTRACT: "Contract",
}


def _linear(key: str, label: str, group: GroupKey, span: float, offset: float = 0.0) -> VariableDefinition:
    return VariableDefinition(key=key, label=label, group=group, scale=LinearScale(span=span, offset=offset))


def _category(key: str, label: str, group: GroupKey, scores: Dict[str, float], fallback: float) -> VariableDefinition:
    return VariableDefinition(key=key, label=label, group=group, scale=CategoryTable(scores=scores, fallback=fallback))


def _multi(key: str, label: str, group: GroupKey, options: List[str], inverted: bool = False) -> VariableDefinition:
    return VariableDefinition(
        key=key,
        label=label,
        group=group,
        scale=MultiSelectScale(inverted=inverted, known_options=options),
    )


# Ordered per group; the order is the tie-break for contributor ranking
_DEFINITIONS: List[VariableDefinition] = [
    # operationeel
    _linear("skuCount", "Aantal SKU's", GroupKey.OPERATIONEEL, span=2000),
    _linear("orderVolume", "Ordervolume / maand", GroupKey.OPERATIONEEL, span=20000),
    _linear("orderPeak", "Orderpiek / maand", GroupKey.OPERATIONEEL, span=40000),
    _linear("retourPercentage", "Retourpercentage %", GroupKey.OPERATIONEEL, span=100),
    _category("skuComplexity", "SKU-complexiteit", GroupKey.OPERATIONEEL,
              {"standaard": 10, "varianten": 50, "bundels": 80}, fallback=40),
    _category("seizoensinvloed", "Seizoensinvloed", GroupKey.OPERATIONEEL,
              {"laag": 10, "medium": 45, "hoog": 80}, fallback=45),
    _multi("vasActiviteiten", "VAS-activiteiten", GroupKey.OPERATIONEEL,
           ["stickeren", "bundelen", "inspectie", "labelen", "sets bouwen"]),
    _multi("inboundBijzonderheden", "Inbound bijzonderheden", GroupKey.OPERATIONEEL,
           ["kwaliteitscontrole", "afwijkende verpakking", "barcodering", "douane-documentatie"]),

    # technisch
    _category("platformType", "Platformtype", GroupKey.TECHNISCH,
              {"Shopify": 20, "Magento": 60, "WooCommerce": 40, "Lightspeed": 25, "Bol.com": 50, "API": 70},
              fallback=50),
    _category("typeKoppeling", "Type koppeling", GroupKey.TECHNISCH,
              {"API": 70, "SFTP": 40, "plugin": 30, "handmatig": 80}, fallback=50),
    # More PostNL APIs in use lowers complexity
    _multi("postnlApis", "PostNL API's", GroupKey.TECHNISCH,
           ["Locatie", "Checkout", "Retour", "Track & Trace", "Order Management"], inverted=True),

    # configuratie
    _category("configDoor", "Configuratie door", GroupKey.CONFIGURATIE,
              {"klant": 60, "postnl": 30, "hybride": 50}, fallback=50),
    _category("mateMaatwerk", "Mate van maatwerk", GroupKey.CONFIGURATIE,
              {"geen": 10, "licht": 45, "zwaar": 85}, fallback=50),
    _category("mappingComplexiteit", "Mapping-complexiteit", GroupKey.CONFIGURATIE,
              {"standaard": 20, "custom": 60, "dynamisch": 80}, fallback=50),
    _category("testCapaciteit", "Testcapaciteit (klant)", GroupKey.CONFIGURATIE,
              {"laag": 80, "gemiddeld": 45, "hoog": 20}, fallback=50),

    # organisatie
    _linear("aantalAfdelingen", "Aantal afdelingen (klantzijde)", GroupKey.ORGANISATIE, span=6, offset=1),
    _category("scopeWijzigingen", "Scope wijzigingen", GroupKey.ORGANISATIE,
              {"weinig": 30, "gemiddeld": 55, "veel": 80}, fallback=55),

    # processen
    _category("voorraadBeheer", "Voorraadbeheer", GroupKey.PROCESSEN,
              {"realtime": 30, "batch": 55, "handmatig": 85}, fallback=50),
    _category("replenishment", "Replenishment", GroupKey.PROCESSEN,
              {"geautomatiseerd": 30, "periodiek": 55, "handmatig": 80}, fallback=50),
    _category("verzendMethoden", "Verzendmethoden", GroupKey.PROCESSEN,
              {"standaard": 25, "maatwerk": 65, "externe": 75}, fallback=50),
    _category("retourProces", "Retourproces", GroupKey.PROCESSEN,
              {"portaal": 35, "handmatig": 75}, fallback=55),

    # rapportage
    _category("dashboardGebruik", "Dashboardgebruik", GroupKey.RAPPORTAGE,
              {"dagelijks": 20, "wekelijks": 45, "zelden": 70}, fallback=45),
    _category("rapportageBehoefte", "Rapportagebehoefte", GroupKey.RAPPORTAGE,
              {"standaard": 30, "uitgebreid": 55, "maatwerk": 80}, fallback=55),

    # contract
    _category("serviceUitbreiding", "Service-uitbreiding", GroupKey.CONTRACT,
              {"nee": 30, "ja": 75}, fallback=30),
]

VARIABLES: Dict[str, VariableDefinition] = {definition.key: definition for definition in _DEFINITIONS}

GROUP_VARIABLES: Dict[GroupKey, List[str]] = {
    group: [definition.key for definition in _DEFINITIONS if definition.group == group]
    for group in GroupKey
}


TIERS: Dict[TierCode, Tier] = {
    TierCode.A1: Tier(code=TierCode.A1, lead="2–3 weken", color="#16a34a"),
    TierCode.A2: Tier(code=TierCode.A2, lead="3–4 weken", color="#22c55e"),
    TierCode.A3: Tier(code=TierCode.A3, lead="4–6 weken", color="#84cc16"),
    TierCode.B1: Tier(code=TierCode.B1, lead="4–5 weken", color="#f59e0b"),
    TierCode.B2: Tier(code=TierCode.B2, lead="5–7 weken", color="#f97316"),
    TierCode.C1: Tier(code=TierCode.C1, lead="8–12 weken", color="#ef4444"),
}


def default_inputs() -> ClassifierInput:
    """Questionnaire answers of a typical mid-size webshop"""
    return ClassifierInput(
        skuCount=300,
        orderVolume=5000,
        orderPeak=8000,
        retourPercentage=7,
        aantalAfdelingen=2,
        skuComplexity="varianten",
        seizoensinvloed="medium",
        platformType="Shopify",
        typeKoppeling="API",
        configDoor="postnl",
        mateMaatwerk="licht",
        mappingComplexiteit="custom",
        testCapaciteit="gemiddeld",
        voorraadBeheer="realtime",
        replenishment="periodiek",
        verzendMethoden="maatwerk",
        retourProces="portaal",
        dashboardGebruik="wekelijks",
        rapportageBehoefte="uitgebreid",
        serviceUitbreiding="nee",
        scopeWijzigingen="gemiddeld",
        vasActiviteiten={"stickeren": True, "bundelen": False, "inspectie": False},
        inboundBijzonderheden={
            "kwaliteitscontrole": True,
            "afwijkende verpakking": False,
            "barcodering": True,
        },
        postnlApis={
            "Locatie": True,
            "Checkout": True,
            "Retour": True,
            "Track & Trace": True,
        },
    )


def default_snapshot() -> ClassifierRequest:
    return ClassifierRequest(
        inputs=default_inputs(),
        gw=GroupWeights(),
        vw=VarWeights(),
        th=Thresholds(),
    )
