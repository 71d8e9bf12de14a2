from typing import Any, Dict, List, Literal, Optional, Set
from pydantic import BaseModel, ConfigDict, Field

# Closed vocabularies (gives nice validation + docs)
SortOption = Literal["new", "price-asc", "price-desc", "popular"]
FitPreference = Literal["slim", "regular", "relaxed"]
MeasurementMode = Literal["quick", "detailed"]
SizeLabel = Literal["XS", "S", "M", "L", "XL", "XXL"]
OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]


class Product(BaseModel):
    """
    A catalogue entry as the filter engine sees it.
    Optional facets stay None when the row doesn't carry them, so an
    active filter on that facet never matches.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: float = Field(ge=0)
    image: Optional[str] = None
    category: Optional[str] = None
    fabric: Optional[str] = None
    fit: Optional[str] = None
    gender: Optional[str] = None
    sizes: List[str] = Field(default_factory=list)
    is_essential: bool = False
    is_highlight: bool = False
    # Display only; never applied to price
    offer_percentage: int = Field(default=0, ge=0, le=100)
    season: Optional[str] = None
    festival: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Product":
        """Build a Product from a Supabase `products` row."""
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            price=float(row.get("price") or 0),
            image=row.get("image_url") or row.get("image"),
            category=row.get("category"),
            fabric=row.get("fabric"),
            fit=row.get("fit"),
            gender=row.get("gender"),
            sizes=list(row.get("sizes") or []),
            is_essential=bool(row.get("is_essential")),
            is_highlight=bool(row.get("is_highlight")),
            offer_percentage=int(row.get("offer_percentage") or 0),
            season=row.get("season"),
            festival=row.get("festival"),
            created_at=row.get("created_at"),
        )


class FilterState(BaseModel):
    """
    Facet selections owned by the calling view.
    Empty set = facet inactive. Treat as a value: helpers in
    `catalog` return new instances instead of mutating this one.
    """
    gender: Set[str] = Field(default_factory=set)
    category: Set[str] = Field(default_factory=set)
    fabric: Set[str] = Field(default_factory=set)
    fit: Set[str] = Field(default_factory=set)
    size: Set[str] = Field(default_factory=set)
    price: Set[str] = Field(default_factory=set)
    festival: Set[str] = Field(default_factory=set)
    # Top-bar quick filter; "all" means no constraint
    festival_quick: str = "all"
    essentials: bool = False
    new_in: bool = False
    sort_by: SortOption = "new"


class ProductListResponse(BaseModel):
    """
    Filtered catalogue page plus per-option facet counts.
    """
    items: List[Product]
    total: int
    matched: int
    counts: Dict[str, Dict[str, int]] = Field(default_factory=dict)
    active_filters: int = 0


class Measurements(BaseModel):
    """
    What the fit wizard collected. Height is the only value the UI
    insists on; everything else may be missing.
    """
    height_cm: Optional[float] = None
    chest_cm: Optional[float] = None
    waist_cm: Optional[float] = None
    fit_preference: FitPreference = "regular"
    mode: MeasurementMode = "quick"


class SizeRecommendation(BaseModel):
    size: SizeLabel
    # 0 means "placeholder, nothing measured"
    confidence: int = Field(ge=0, le=100)


class PhotoSummary(BaseModel):
    filename: str
    width: int
    height: int


class PhotoCheckResponse(BaseModel):
    photos_uploaded: int
    photos: List[PhotoSummary] = Field(default_factory=list)


class FitProfile(BaseModel):
    """
    Saved wizard answers (stored as free text, the way the form sends them).
    """
    user_id: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    chest: Optional[str] = None
    waist: Optional[str] = None
    hips: Optional[str] = None
    preferred_fit: FitPreference = "regular"
    notes: Optional[str] = None


class CartItem(BaseModel):
    product_id: str
    name: str
    price: float = Field(ge=0)
    selected_size: str
    quantity: int = Field(ge=1)


class Address(BaseModel):
    street: str = ""
    city: str = ""
    postcode: str = ""
    country: str = "United Kingdom"


class Order(BaseModel):
    id: str
    user_id: str
    items: List[CartItem]
    total: float
    status: OrderStatus = "pending"
    created_at: str
    shipping_address: Address = Field(default_factory=Address)
    shipped_at: Optional[str] = None
    delivered_at: Optional[str] = None


class CheckoutRequest(BaseModel):
    """
    Body for placing an order from the client-side cart.
    """
    user_id: str
    items: List[CartItem]
    shipping_address: Optional[Address] = None


class StatusUpdate(BaseModel):
    status: OrderStatus


class AuthUser(BaseModel):
    id: str
    email: str
    name: str
    joined_date: str


class SignUpRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class OtpRequest(BaseModel):
    email: str
    # "login" never creates a user; "signup" does; "resend" re-sends the confirmation mail
    purpose: Literal["login", "signup", "resend"] = "login"


class VerifyOtpRequest(BaseModel):
    email: str
    token: str


class AuthSession(BaseModel):
    """
    Signed-in user plus the Supabase tokens the client sends back as
    `Authorization: Bearer <access_token>`. Tokens are empty when sign-up
    still waits on email confirmation.
    """
    user: AuthUser
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None


class UserProfile(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    joined_date: Optional[str] = None


class UserProfileUpdate(BaseModel):
    # Only the fields a customer may edit themselves
    name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class CartLineRequest(BaseModel):
    product_id: str
    selected_size: str
    quantity: int = Field(default=1, ge=1)


class CartQuantityUpdate(BaseModel):
    # 0 or less drops the line
    quantity: int


class NewsletterRequest(BaseModel):
    email: str
