"""
Static catalog for the storefront.

Prices are whole rupees. Loaded once by the composition root and handed to
CatalogQueryService; nothing mutates these lists at runtime.
"""
from app.domain.entities import Category, Product, ProductSpecifications, Subcategory

_PEXELS = "https://images.pexels.com/photos"
_NECKLACE = f"{_PEXELS}/1454166/pexels-photo-1454166.jpeg?auto=compress&cs=tinysrgb"
_RING = f"{_PEXELS}/1721558/pexels-photo-1721558.jpeg?auto=compress&cs=tinysrgb"
_BANGLE = f"{_PEXELS}/2735981/pexels-photo-2735981.jpeg?auto=compress&cs=tinysrgb"

CATEGORIES = [
    Category(
        id="all-jewellery",
        name="All Jewellery",
        description="Complete collection of traditional Maharashtrian jewelry",
        image=f"{_RING}&w=800",
        subcategories=[
            Subcategory(id="thushi", name="Thushi", description="Traditional Maharashtrian necklaces", image="/thushi.png"),
            Subcategory(id="earrings", name="Earrings", description="Elegant traditional earrings", image=f"{_NECKLACE}&w=400"),
            Subcategory(id="bracelets", name="Bracelets", description="Beautiful traditional bracelets", image=f"{_BANGLE}&w=400"),
            Subcategory(id="rings", name="Rings", description="Exquisite traditional rings", image=f"{_RING}&w=400"),
            Subcategory(id="anklets", name="Anklets", description="Graceful traditional anklets", image=f"{_BANGLE}&w=400"),
            Subcategory(id="nath", name="Nath", description="Traditional nose rings", image="/nath.png"),
        ],
    ),
    Category(
        id="mangalsutra",
        name="Mangalsutra",
        description="Sacred marriage jewelry with traditional significance",
        image=f"{_NECKLACE}&w=800",
        subcategories=[
            Subcategory(id="diamond-mangalsutra", name="Diamond", description="Diamond studded mangalsutras", image=f"{_NECKLACE}&w=400"),
            Subcategory(id="daily-wear", name="Daily Wear", description="Comfortable everyday mangalsutras", image=f"{_RING}&w=400"),
            Subcategory(id="gold-polish", name="Gold Polish", description="Traditional gold polished designs", image=f"{_BANGLE}&w=400"),
        ],
    ),
    Category(
        id="nath-category",
        name="Nath",
        description="Traditional Maharashtrian nose jewelry",
        image="/nath.png",
        subcategories=[
            Subcategory(id="gold-nath", name="Gold", description="Pure gold nath designs", image="/nath.png"),
            Subcategory(id="moti-nath", name="Moti", description="Pearl studded nath", image=f"{_NECKLACE}&w=400"),
            Subcategory(id="oxide-nath", name="Oxide", description="Oxidized silver nath", image=f"{_BANGLE}&w=400"),
            Subcategory(id="handmade-nath", name="Handmade", description="Handcrafted traditional nath", image=f"{_RING}&w=400"),
            Subcategory(id="custom-nath", name="Customise", description="Custom designed nath", image="/nath.png"),
        ],
    ),
    Category(
        id="oxide",
        name="Oxide",
        description="Oxidized silver jewelry with antique finish",
        image=f"{_BANGLE}&w=800",
        subcategories=[
            Subcategory(id="oxide-bangles", name="Bangles", description="Oxidized silver bangles", image=f"{_BANGLE}&w=400"),
            Subcategory(id="oxide-thushi", name="Thushi", description="Oxidized silver thushi sets", image="/thushi.png"),
            Subcategory(id="oxide-nath-sub", name="Nath", description="Oxidized silver nath", image="/nath.png"),
        ],
    ),
    Category(
        id="bridal",
        name="Bridal",
        description="Complete bridal jewelry collections",
        image=f"{_NECKLACE}&w=800",
        subcategories=[
            Subcategory(id="maharashtrian-bridal", name="Maharashtrian", description="Traditional Maharashtrian bridal sets", image=f"{_NECKLACE}&w=400"),
            Subcategory(id="south-indian-bridal", name="South Indian", description="South Indian bridal jewelry", image=f"{_RING}&w=400"),
        ],
    ),
]

PRODUCTS = [
    Product(
        id=1,
        name="Royal Thushi Set",
        price=45999,
        original_price=52999,
        image="/thushi.png",
        model_image=f"{_NECKLACE}&w=800",
        category="all-jewellery",
        subcategory="thushi",
        rating=4.8,
        reviews=124,
        description=(
            "Exquisite traditional Maharashtrian Thushi set crafted with 22K gold and "
            "adorned with precious pearls. Perfect for weddings and special occasions."
        ),
        specifications=ProductSpecifications(
            material="22K Gold",
            weight="45 grams",
            dimensions="18 inches length",
            purity="916 Hallmarked",
            gemstones=["Natural Pearls", "Ruby"],
        ),
        images=["/thushi.png", f"{_NECKLACE}&w=800", f"{_RING}&w=800"],
        in_stock=True,
        featured=True,
        tags=["traditional", "wedding", "gold", "pearls", "maharashtrian"],
    ),
    Product(
        id=2,
        name="Maharani Necklace",
        price=89999,
        original_price=99999,
        image=f"{_NECKLACE}&w=400",
        model_image=f"{_NECKLACE}&w=800",
        category="all-jewellery",
        subcategory="thushi",
        rating=4.9,
        reviews=89,
        description=(
            "A regal necklace featuring intricate gold work and precious gemstones, "
            "in the grandeur of Maratha royalty."
        ),
        specifications=ProductSpecifications(
            material="22K Gold",
            weight="65 grams",
            dimensions="20 inches length",
            purity="916 Hallmarked",
            gemstones=["Emerald", "Ruby", "Diamond"],
        ),
        images=[f"{_NECKLACE}&w=400", f"{_RING}&w=800", f"{_BANGLE}&w=800"],
        in_stock=True,
        featured=True,
        tags=["premium", "royal", "gold", "gemstones", "necklace"],
    ),
    Product(
        id=3,
        name="Heritage Bangles Set",
        price=32999,
        original_price=38999,
        image=f"{_BANGLE}&w=400",
        model_image=f"{_BANGLE}&w=800",
        category="all-jewellery",
        subcategory="bracelets",
        rating=4.7,
        reviews=67,
        description=(
            "Traditional gold bangles with intricate patterns representing prosperity "
            "and marital bliss."
        ),
        specifications=ProductSpecifications(
            material="22K Gold",
            weight="35 grams (pair)",
            dimensions="2.5 inches diameter",
            purity="916 Hallmarked",
        ),
        images=[f"{_BANGLE}&w=400", f"{_NECKLACE}&w=800"],
        in_stock=True,
        featured=False,
        tags=["bridal", "bangles", "gold", "traditional", "pair"],
    ),
    Product(
        id=4,
        name="Traditional Nath",
        price=15999,
        original_price=18999,
        image="/nath.png",
        model_image=f"{_NECKLACE}&w=800",
        category="nath-category",
        subcategory="gold-nath",
        rating=4.6,
        reviews=156,
        description=(
            "Authentic Maharashtrian Nath with delicate gold work and pearl drops."
        ),
        specifications=ProductSpecifications(
            material="22K Gold",
            weight="8 grams",
            dimensions="3 inches length",
            purity="916 Hallmarked",
            gemstones=["Natural Pearls"],
        ),
        images=["/nath.png", f"{_NECKLACE}&w=800"],
        in_stock=True,
        featured=True,
        tags=["nath", "traditional", "gold", "pearls", "bridal"],
    ),
    Product(
        id=5,
        name="Diamond Mangalsutra",
        price=125999,
        original_price=145999,
        image=f"{_NECKLACE}&w=400",
        model_image=f"{_NECKLACE}&w=800",
        category="mangalsutra",
        subcategory="diamond-mangalsutra",
        rating=4.9,
        reviews=203,
        description=(
            "Elegant diamond mangalsutra combining traditional significance with "
            "modern aesthetics."
        ),
        specifications=ProductSpecifications(
            material="18K Gold",
            weight="25 grams",
            dimensions="16 inches length",
            purity="750 Hallmarked",
            gemstones=["Diamonds (0.5 carat total)"],
        ),
        images=[f"{_NECKLACE}&w=400", f"{_RING}&w=800"],
        in_stock=True,
        featured=True,
        tags=["mangalsutra", "diamond", "modern", "bridal", "gold"],
    ),
    Product(
        id=6,
        name="Oxidized Silver Bangles",
        price=2999,
        original_price=3999,
        image=f"{_BANGLE}&w=400",
        model_image=f"{_BANGLE}&w=800",
        category="oxide",
        subcategory="oxide-bangles",
        rating=4.4,
        reviews=89,
        description=(
            "Oxidized silver bangles with traditional motifs, for daily wear and "
            "ethnic occasions."
        ),
        specifications=ProductSpecifications(
            material="Sterling Silver",
            weight="40 grams (set of 4)",
            dimensions="2.4 inches diameter",
            purity="925 Silver",
        ),
        images=[f"{_BANGLE}&w=400", f"{_NECKLACE}&w=800"],
        in_stock=False,
        featured=False,
        tags=["oxidized", "silver", "bangles", "daily-wear", "affordable"],
    ),
]
