"""
names.py

Best-effort gender hint for a character name, used only to bias downstream
voice selection. Pure and deterministic: no I/O, no randomness.

Order of checks:
1) explicit role nouns and honorifics (MOTHER, DAD, MRS., ...) as whole words
2) a curated list of common first names, matched as whole words
3) otherwise "Unknown"
"""
from __future__ import annotations

import re
from typing import FrozenSet

from screenplay_parser.model.document import GENDER_FEMALE, GENDER_MALE, GENDER_UNKNOWN, GenderHint

FEMALE_KEYWORDS: FrozenSet[str] = frozenset({
    "MOM", "MOMMY", "MOTHER", "MA", "GRANDMA", "GRANDMOTHER", "WOMAN", "WOMEN", "GIRL",
    "LADY", "SISTER", "DAUGHTER", "AUNT", "NIECE", "WIFE", "BRIDE", "QUEEN", "PRINCESS",
    "WAITRESS", "ACTRESS", "HOSTESS", "NUN", "MRS", "MS", "MISS", "MADAM", "MADAME",
})

MALE_KEYWORDS: FrozenSet[str] = frozenset({
    "DAD", "DADDY", "FATHER", "PA", "GRANDPA", "GRANDFATHER", "MAN", "MEN", "BOY", "GUY",
    "BROTHER", "SON", "UNCLE", "NEPHEW", "HUSBAND", "GROOM", "KING", "PRINCE", "WAITER",
    "ACTOR", "HOST", "PRIEST", "MONK", "MR", "SIR", "LORD",
})

FEMALE_NAMES: FrozenSet[str] = frozenset({
    "MARY", "PATRICIA", "JENNIFER", "LINDA", "ELIZABETH", "BARBARA", "SUSAN", "JESSICA",
    "SARAH", "KAREN", "LISA", "NANCY", "BETTY", "MARGARET", "SANDRA", "ASHLEY", "KIMBERLY",
    "EMILY", "DONNA", "MICHELLE", "DOROTHY", "CAROL", "AMANDA", "MELISSA", "DEBORAH",
    "STEPHANIE", "REBECCA", "LAURA", "SHARON", "CYNTHIA", "KATHLEEN", "AMY", "ANGELA",
    "ANNA", "ANNE", "EMMA", "OLIVIA", "SOPHIA", "ISABELLA", "MIA", "CHARLOTTE", "GRACE",
    "CHLOE", "JULIA", "KATE", "KATHERINE", "RACHEL", "HANNAH", "LUCY", "ALICE", "CLAIRE",
    "HELEN", "JANE", "JULIE", "MARIA", "MEGAN", "NICOLE", "SAMANTHA", "VICTORIA", "ZOE",
    "HERMIONE", "GINNY", "MOLLY", "DAWN", "ELLEN", "ROSE", "RUTH", "SOPHIE", "TERESA",
})

MALE_NAMES: FrozenSet[str] = frozenset({
    "JOHN", "JACK", "JAMES", "DAVID", "MICHAEL", "ROBERT", "WILLIAM", "JOSEPH", "THOMAS",
    "CHARLES", "CHRISTOPHER", "DANIEL", "MATTHEW", "ANTHONY", "DONALD", "MARK", "PAUL",
    "STEVEN", "STEVE", "ANDREW", "KENNETH", "JOSHUA", "KEVIN", "BRIAN", "GEORGE",
    "TIMOTHY", "RON", "RONALD", "JEFF", "JEFFREY", "GREG", "GREGORY", "EDWARD", "FRANK",
    "PETER", "HENRY", "HARRY", "SAM", "SAMUEL", "BEN", "BENJAMIN", "NICK", "NICHOLAS",
    "TOM", "TONY", "MIKE", "BOB", "BILL", "JIM", "JOE", "DAN", "ALEX", "ADAM", "ERIC",
    "LUKE", "MAX", "OLIVER", "LIAM", "NOAH", "ETHAN", "JACOB", "RYAN", "SCOTT", "WALTER",
    "ARTHUR", "ALBUS", "DRACO", "HAGRID", "VICTOR", "VINCENT", "LOUIS", "CARL", "ROGER",
})

_WORD_RE = re.compile(r"[A-Z]+(?:'[A-Z]+)?")


def detect_gender(name: str) -> GenderHint:
    """Return "M", "F" or "Unknown" for a character name."""
    words = _WORD_RE.findall(name.upper())
    if not words:
        return GENDER_UNKNOWN

    for w in words:
        if w in FEMALE_KEYWORDS:
            return GENDER_FEMALE
        if w in MALE_KEYWORDS:
            return GENDER_MALE

    for w in words:
        if w in FEMALE_NAMES:
            return GENDER_FEMALE
        if w in MALE_NAMES:
            return GENDER_MALE

    return GENDER_UNKNOWN
