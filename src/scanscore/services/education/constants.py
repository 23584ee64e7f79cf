"""Ingredient education catalog.

Contains:
- Additive categories keyed by id
- Catalog ingredients with their label aliases, in match priority order
"""

from __future__ import annotations

from typing import Final

from scanscore.schemas.education import EducationEntry, IngredientCategory


# =============================================================================
# Categories
# =============================================================================

_CATEGORY_LIST: Final[tuple[IngredientCategory, ...]] = (
    IngredientCategory(
        id="artificial_sweeteners",
        name="Artificial Sweeteners",
        concept=(
            "Sugar substitutes that can be hundreds of times sweeter than sugar, but may "
            "carry health trade-offs your taste buds don't warn you about."
        ),
        detail=(
            "While they promise zero calories, research increasingly links artificial "
            "sweeteners to disrupted gut bacteria, metabolic changes, and even cancer risk. "
            "The WHO classified aspartame as 'possibly carcinogenic' in 2023. Plant-derived "
            "options like stevia and monk fruit are generally considered safer alternatives."
        ),
    ),
    IngredientCategory(
        id="emulsifiers",
        name="Emulsifiers",
        concept=(
            "Additives that keep ingredients from separating, like oil and water staying "
            "mixed, but they may also break down your gut's protective barriers."
        ),
        detail=(
            "Emulsifiers like polysorbate 80 and carboxymethylcellulose have been shown to "
            "thin the intestinal mucus layer that protects your gut lining. A large study of "
            "92,000+ participants linked mono- and diglycerides to a 15% increased cancer "
            "risk. Carrageenan was removed from organic food standards due to safety concerns."
        ),
    ),
    IngredientCategory(
        id="preservatives",
        name="Preservatives",
        concept=(
            "Chemicals that extend shelf life by preventing spoilage, but some have been "
            "linked to cancer and organ damage at higher exposures."
        ),
        detail=(
            "BHA has been listed as a carcinogen in California since 1990, and the FDA is "
            "reassessing it in 2026. Sodium benzoate can form benzene (a known carcinogen) "
            "when combined with vitamin C. Sodium nitrite and nitrate form cancer-causing "
            "nitrosamines inside the body."
        ),
    ),
    IngredientCategory(
        id="artificial_colors",
        name="Artificial Colors",
        concept=(
            "Synthetic dyes that make food look more appealing but offer zero nutritional "
            "value, and several are being banned or phased out worldwide."
        ),
        detail=(
            "Red No. 3 was banned in the US in January 2025 as a genotoxic carcinogen, and "
            "the FDA has planned phase-outs for several more dyes. The EU requires "
            "hyperactivity warnings on foods containing Yellow No. 5 and Yellow No. 6. "
            "Titanium dioxide has been banned in the EU since 2022 but remains FDA-approved "
            "in the US."
        ),
    ),
    IngredientCategory(
        id="flavor_enhancers",
        name="Flavor Enhancers",
        concept=(
            "Additives designed to make food taste better, often by triggering umami "
            "receptors, but many are hidden forms of MSG or contain undisclosed chemicals."
        ),
        detail=(
            "Ingredients like hydrolyzed vegetable protein and autolyzed yeast contain free "
            "glutamates, effectively acting as hidden MSG sources. 'Natural flavors' can be "
            "80-90% solvents and additives, potentially containing 100+ undisclosed "
            "chemicals. Diacetyl, a butter flavoring, causes an incurable lung disease known "
            "as 'popcorn lung.'"
        ),
    ),
    IngredientCategory(
        id="thickeners",
        name="Thickeners",
        concept=(
            "Substances that give processed foods a desirable texture, ranging from "
            "generally safe natural gums to chemically modified starches."
        ),
        detail=(
            "Modified food starch can have a higher glycemic index than table sugar, spiking "
            "blood sugar despite sounding harmless. Xanthan gum and guar gum are generally "
            "considered safe, with guar gum potentially offering prebiotic benefits. These "
            "are among the less concerning additives when naturally derived."
        ),
    ),
    IngredientCategory(
        id="hidden_sugars",
        name="Hidden Sugars",
        concept=(
            "Sugars disguised under unfamiliar names that make processed foods seem "
            "healthier than they are. Your body processes them the same way."
        ),
        detail=(
            "High fructose corn syrup promotes liver fat and insulin resistance and serves as "
            "a reliable marker for ultra-processed food. Maltodextrin has a higher glycemic "
            "index than table sugar despite being marketed as a 'complex carbohydrate.' "
            "Names like 'evaporated cane juice' and 'fruit juice concentrate' are "
            "essentially sugar with healthier-sounding labels."
        ),
    ),
    IngredientCategory(
        id="processing_aids",
        name="Processing Aids",
        concept=(
            "Industrial chemicals used during food manufacturing that may leave residues in "
            "the final product. Many are banned in other countries."
        ),
        detail=(
            "Hexane, a neurotoxin used for oil extraction, can leave residues in food and is "
            "banned in organic production. Potassium bromate is a genotoxic carcinogen "
            "banned in most countries but still used in the US until California's ban takes "
            "effect in 2027. Azodicarbonamide breaks down into cancer-linked chemicals and is "
            "banned in the EU."
        ),
    ),
    IngredientCategory(
        id="trans_fats",
        name="Trans Fats",
        concept=(
            "Industrially produced fats strongly linked to heart disease that were "
            "effectively banned in 2018, but trace amounts and newer replacements still "
            "appear in food."
        ),
        detail=(
            "Partially hydrogenated oils were the primary source of artificial trans fats "
            "and are now largely banned, though trace amounts can still be present. Fully "
            "hydrogenated oils are saturated fats that still carry cardiovascular risk. "
            "Interesterified fats are a newer replacement with limited long-term safety data "
            "available."
        ),
    ),
    IngredientCategory(
        id="flour_bleaching",
        name="Flour Bleaching",
        concept=(
            "Chemical agents used to whiten flour and speed up aging, destroying nutrients "
            "in the process. Most are banned in the EU."
        ),
        detail=(
            "Chlorine gas bleaches flour while destroying vitamins and is banned in the EU. "
            "Benzoyl peroxide generates reactive oxygen species during the bleaching process. "
            "These chemicals are used purely for cosmetic and processing speed purposes, "
            "offering no benefit to consumers."
        ),
    ),
)

CATEGORIES: Final[dict[str, IngredientCategory]] = {c.id: c for c in _CATEGORY_LIST}


# =============================================================================
# Ingredients
# =============================================================================


def _entry(
    term: str,
    category_id: str,
    short_explain: str,
    aliases: tuple[str, ...] = (),
    regulatory_status: str | None = None,
) -> EducationEntry:
    return EducationEntry(
        term=term,
        aliases=list(aliases),
        category_id=category_id,
        short_explain=short_explain,
        regulatory_status=regulatory_status,
    )


# Order matters: the first entry whose term or alias matches wins.
INGREDIENTS: Final[tuple[EducationEntry, ...]] = (
    # Artificial sweeteners
    _entry(
        "Aspartame",
        "artificial_sweeteners",
        "Artificial sweetener classified as 'possibly carcinogenic' (Group 2B) by the WHO "
        "in 2023.",
        ("NutraSweet", "Equal", "AminoSweet"),
        "WHO Group 2B carcinogen (2023)",
    ),
    _entry(
        "Sucralose",
        "artificial_sweeteners",
        "Synthetic sweetener 600x sweeter than sugar, linked to altered gut bacteria and "
        "increased coronary artery disease risk.",
        ("Splenda",),
    ),
    _entry(
        "Acesulfame Potassium",
        "artificial_sweeteners",
        "Artificial sweetener linked to cancer risk in a 2022 study and potential early "
        "puberty in children.",
        ("Acesulfame-K", "Sunett", "Sweet One"),
    ),
    _entry(
        "Saccharin",
        "artificial_sweeteners",
        "The oldest artificial sweetener, once listed as a carcinogen but delisted in 2000 "
        "after further review.",
        ("Sweet'N Low",),
        "Delisted as carcinogen in 2000",
    ),
    _entry(
        "Stevia",
        "artificial_sweeteners",
        "Plant-derived sweetener generally considered safer than synthetic alternatives, "
        "though long-term data remains limited.",
        ("Rebaudioside A", "Steviol Glycosides"),
    ),
    _entry(
        "Monk Fruit Extract",
        "artificial_sweeteners",
        "Plant-derived sweetener generally considered safe with no major health concerns "
        "identified to date.",
    ),
    # Emulsifiers
    _entry(
        "Carboxymethylcellulose",
        "emulsifiers",
        "Emulsifier shown to thin the intestinal mucus layer, linked to leaky gut and "
        "intestinal inflammation.",
        ("CMC", "Cellulose Gum", "E466"),
    ),
    _entry(
        "Polysorbate 80",
        "emulsifiers",
        "Emulsifier linked to gut damage and intergenerational health impacts in animal "
        "studies.",
        ("Tween 80", "E433"),
    ),
    _entry(
        "Polysorbate 60",
        "emulsifiers",
        "Emulsifier in the same chemical family as Polysorbate 80, sharing similar gut "
        "health concerns.",
        ("Tween 60",),
    ),
    _entry(
        "Carrageenan",
        "emulsifiers",
        "Seaweed-derived emulsifier linked to cancer risk in a 2024 study and removed from "
        "organic food standards.",
        ("Irish Moss", "E407"),
        "Removed from USDA organic standards",
    ),
    _entry(
        "Mono- and Diglycerides",
        "emulsifiers",
        "Common emulsifier associated with a 15% increased cancer risk in a study of over "
        "92,000 participants.",
        ("E471",),
    ),
    _entry(
        "Soy Lecithin",
        "emulsifiers",
        "Emulsifier typically extracted using hexane, a neurotoxin solvent, with potential "
        "residue concerns.",
        ("E322",),
    ),
    # Preservatives
    _entry(
        "BHA",
        "preservatives",
        "Preservative listed as a carcinogen in California since 1990, with the FDA "
        "reassessing its safety in 2026.",
        ("Butylated Hydroxyanisole",),
        "California-listed carcinogen since 1990; FDA reassessing 2026",
    ),
    _entry(
        "BHT",
        "preservatives",
        "Synthetic preservative restricted in UK cosmetics as of 2024 due to safety "
        "concerns.",
        ("Butylated Hydroxytoluene",),
        "UK restricted in cosmetics (2024)",
    ),
    _entry(
        "TBHQ",
        "preservatives",
        "Preservative linked to cancer and liver enlargement at higher doses in animal "
        "studies.",
        ("Tert-butylhydroquinone",),
    ),
    _entry(
        "Sodium Benzoate",
        "preservatives",
        "Preservative that can form benzene, a known carcinogen, when combined with "
        "vitamin C in beverages.",
        ("E211",),
    ),
    _entry(
        "Sodium Nitrite",
        "preservatives",
        "Curing agent that forms cancer-causing nitrosamines inside the body during "
        "digestion.",
        ("E250",),
    ),
    _entry(
        "Sodium Nitrate",
        "preservatives",
        "Preservative that converts to nitrite in the body, carrying the same nitrosamine "
        "cancer risk.",
        ("E251",),
    ),
    _entry(
        "Potassium Sorbate",
        "preservatives",
        "Widely used preservative with emerging concerns about reproductive and "
        "developmental toxicity.",
        ("E202",),
    ),
    # Artificial colors
    _entry(
        "Red No. 3",
        "artificial_colors",
        "Synthetic red dye banned in the US as of January 2025 after being identified as "
        "a genotoxic carcinogen.",
        ("Erythrosine", "Red 3", "FD&C Red No. 3"),
        "BANNED in US (January 2025)",
    ),
    _entry(
        "Red No. 40",
        "artificial_colors",
        "The most widely used red dye in the US, linked to hyperactivity in children with "
        "an FDA phase-out planned.",
        ("Allura Red", "E129", "Red 40", "FD&C Red No. 40"),
        "FDA phase-out planned",
    ),
    _entry(
        "Yellow No. 5",
        "artificial_colors",
        "Synthetic dye requiring hyperactivity warnings in the EU and associated with "
        "allergic reactions.",
        ("Tartrazine", "E102", "Yellow 5", "FD&C Yellow No. 5"),
        "EU requires hyperactivity warning",
    ),
    _entry(
        "Yellow No. 6",
        "artificial_colors",
        "Synthetic dye with the same hyperactivity and allergy concerns as Yellow No. 5.",
        ("Sunset Yellow", "E110", "Yellow 6", "FD&C Yellow No. 6"),
        "EU requires hyperactivity warning",
    ),
    _entry(
        "Blue No. 1",
        "artificial_colors",
        "Synthetic blue dye on the FDA's planned phase-out list due to safety concerns.",
        ("Brilliant Blue", "E133", "Blue 1", "FD&C Blue No. 1"),
        "On FDA phase-out list",
    ),
    _entry(
        "Blue No. 2",
        "artificial_colors",
        "Synthetic dye derived from indigo, on the FDA's planned phase-out list.",
        ("Indigo Carmine", "E132", "Blue 2", "FD&C Blue No. 2"),
        "On FDA phase-out list",
    ),
    _entry(
        "Green No. 3",
        "artificial_colors",
        "Synthetic green dye on the FDA's planned phase-out list for food use.",
        ("Fast Green", "E143", "Green 3", "FD&C Green No. 3"),
        "On FDA phase-out list",
    ),
    _entry(
        "Titanium Dioxide",
        "artificial_colors",
        "White coloring agent banned in the EU since 2022 due to genotoxicity concerns but "
        "still FDA-approved in the US.",
        ("E171",),
        "Banned in EU (2022); FDA-approved in US",
    ),
    _entry(
        "Caramel Coloring",
        "artificial_colors",
        "Common brown coloring that contains 4-MEI, a possibly carcinogenic compound "
        "listed under California Prop 65.",
        ("4-MEI", "Caramel Color"),
        "California Prop 65 listed",
    ),
    # Flavor enhancers
    _entry(
        "MSG",
        "flavor_enhancers",
        "Flavor enhancer that triggers umami taste, known to cause headaches and flushing "
        "in sensitive individuals.",
        ("Monosodium Glutamate", "E621"),
    ),
    _entry(
        "Hydrolyzed Vegetable Protein",
        "flavor_enhancers",
        "Protein broken down into free glutamates, functioning as a hidden source of MSG "
        "in processed foods.",
        ("HVP",),
    ),
    _entry(
        "Hydrolyzed Soy Protein",
        "flavor_enhancers",
        "Soy-based protein containing free glutamates that acts as a hidden MSG source in "
        "food products.",
    ),
    _entry(
        "Autolyzed Yeast",
        "flavor_enhancers",
        "Flavor ingredient rich in glutamates, commonly used as a hidden MSG source in "
        "processed foods.",
        ("Yeast Extract",),
    ),
    _entry(
        "Natural Flavors",
        "flavor_enhancers",
        "Umbrella term for flavoring that can be 80-90% solvents and additives, "
        "potentially containing 100+ undisclosed chemicals.",
    ),
    _entry(
        "Diacetyl",
        "flavor_enhancers",
        "Butter flavoring chemical that causes 'popcorn lung,' an incurable and "
        "potentially fatal lung disease.",
    ),
    # Thickeners
    _entry(
        "Modified Food Starch",
        "thickeners",
        "Chemically altered starch with a higher glycemic index than table sugar, causing "
        "rapid blood sugar spikes.",
        ("E1404", "E1450", "E1452"),
    ),
    _entry(
        "Xanthan Gum",
        "thickeners",
        "Fermentation-derived thickener generally considered safe and widely used in "
        "gluten-free products.",
        ("E415",),
    ),
    _entry(
        "Guar Gum",
        "thickeners",
        "Plant-derived thickener generally considered safe, with potential prebiotic "
        "benefits for gut health.",
        ("E412",),
    ),
    _entry(
        "Locust Bean Gum",
        "thickeners",
        "Natural thickener derived from carob seeds, generally considered safe for "
        "consumption.",
        ("Carob Gum", "E410"),
    ),
    # Hidden sugars
    _entry(
        "High Fructose Corn Syrup",
        "hidden_sugars",
        "Highly processed sweetener that promotes liver fat and insulin resistance, and is "
        "a reliable marker for ultra-processed food.",
        ("HFCS", "Corn Syrup"),
    ),
    _entry(
        "Maltodextrin",
        "hidden_sugars",
        "Starch-derived additive with a higher glycemic index than sugar despite being "
        "misleadingly called a 'complex carbohydrate.'",
    ),
    _entry(
        "Dextrose",
        "hidden_sugars",
        "Simple sugar chemically identical to blood glucose, rapidly absorbed and spiking "
        "blood sugar levels.",
        ("Corn Sugar",),
    ),
    _entry(
        "Agave Nectar",
        "hidden_sugars",
        "Marketed as a healthy sweetener but contains more fructose than high fructose "
        "corn syrup.",
        ("Agave Syrup",),
    ),
    _entry(
        "Brown Rice Syrup",
        "hidden_sugars",
        "Alternative sweetener that often contains trace amounts of arsenic from rice "
        "cultivation.",
    ),
    _entry(
        "Evaporated Cane Juice",
        "hidden_sugars",
        "Essentially just sugar with a healthier-sounding name used to make products "
        "appear more natural.",
    ),
    _entry(
        "Fruit Juice Concentrate",
        "hidden_sugars",
        "Concentrated sugar stripped of most nutrients, used to sweeten products while "
        "appearing wholesome on labels.",
    ),
    # Processing aids
    _entry(
        "Hexane",
        "processing_aids",
        "Neurotoxic solvent used for oil extraction that can leave residues in food, "
        "banned in organic production.",
        regulatory_status="Banned in organic production",
    ),
    _entry(
        "Chlorine Gas",
        "processing_aids",
        "Industrial bleaching agent used on flour that destroys vitamins and is banned for "
        "food use in the EU.",
        ("Chlorine Dioxide",),
        "Banned in EU for food use",
    ),
    _entry(
        "Benzoyl Peroxide",
        "processing_aids",
        "Flour bleaching agent that generates reactive oxygen species, used purely for "
        "cosmetic whitening of flour.",
    ),
    _entry(
        "Potassium Bromate",
        "processing_aids",
        "Genotoxic carcinogen used in bread-making, banned in most countries and set to be "
        "banned in California by 2027.",
        ("E924",),
        "Banned in most countries; California ban effective 2027",
    ),
    _entry(
        "Azodicarbonamide",
        "processing_aids",
        "Dough conditioner that breaks down into cancer-linked chemicals during baking, "
        "banned in the EU and Australia.",
        ("ADA", "E927a"),
        "Banned in EU and Australia",
    ),
    # Trans fats
    _entry(
        "Partially Hydrogenated Oils",
        "trans_fats",
        "Primary source of artificial trans fats effectively banned since 2018, though "
        "trace amounts can still appear in food.",
        ("PHOs",),
        "Effectively banned in US since 2018",
    ),
    _entry(
        "Fully Hydrogenated Oils",
        "trans_fats",
        "Saturated fats created through complete hydrogenation that still carry "
        "significant cardiovascular risk.",
    ),
    _entry(
        "Interesterified Fats",
        "trans_fats",
        "Newer trans fat replacements with limited long-term safety data, increasingly "
        "used in processed foods.",
    ),
)
