"""FastAPI application factory serving the browser routes."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date

import httpx
from fastapi import (
    Depends,
    FastAPI,
    HTTPException,
    Query,
    Request,
    Response,
    status,
)
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, Field

from diet_web.api.cookies import (
    CookieTokenStore,
    clear_flash,
    read_flash,
    write_flash,
)
from diet_web.app_logging import configure_logging
from diet_web.containers import ApiServices, AppContainer
from diet_web.domain.foods import FoodQuery, RatingRequest
from diet_web.domain.meal_plans import (
    DailyMealPlan,
    MealCompletionRequest,
    MealPlanRequest,
)
from diet_web.domain.recommendations import RecommendationMethod
from diet_web.domain.routes import HOME_PATH, safe_redirect_target
from diet_web.domain.users import LoginCredentials, ProfileUpdate, RegistrationForm
from diet_web.errors import api_error_message
from diet_web.services.notifications import (
    Notification,
    NotificationLevel,
    RecordingNavigator,
    RecordingNotifier,
)
from diet_web.services.recommendations import RecommendationError
from diet_web.services.views import (
    FavoriteFilter,
    FavoriteSort,
    approach_label,
    bmi_category,
    body_mass_index,
    favorite_ratings,
    filter_favorites,
    food_card,
    liked_from_rating,
    meal_completion,
)

_logger = logging.getLogger(__name__)

FEATURED_FOODS = 6
SIMILAR_FOODS = 4

# Failures of a remote call that a page reports instead of crashing.
API_FAILURES = (httpx.HTTPError, RecommendationError, ValueError)


class LoginRequest(BaseModel):
    """Login form submission."""

    email: str
    password: str
    redirect: str | None = None


class RatingSubmission(BaseModel):
    """Star rating from a food card or detail page."""

    rating: float = Field(ge=0, le=5)
    is_liked: bool | None = None


@dataclass
class PageContext:
    """Per-request session, services and pending output."""

    request: Request
    container: AppContainer
    services: ApiServices
    token_store: CookieTokenStore
    notifier: RecordingNotifier
    navigator: RecordingNavigator
    flashed: list[Notification]

    @property
    def redirecting(self) -> bool:
        """Whether something asked to leave the current page."""
        location = self.navigator.location
        return location is not None and location != self.request.url.path

    def notify_error(self, exc: Exception, fallback: str | None = None) -> None:
        """Report a failed API call to the user."""
        if isinstance(exc, RecommendationError):
            message = str(exc)
        elif fallback is not None and not isinstance(exc, httpx.HTTPStatusError):
            message = fallback
        else:
            message = api_error_message(exc)
        self.notifier.notify(NotificationLevel.ERROR, message)

    def render(
        self, payload: dict[str, object], status_code: int = status.HTTP_200_OK
    ) -> Response:
        """Return the page model, or a redirect if one was requested."""
        if self.redirecting:
            return self.redirect()
        session = self.services.session
        body = {
            "path": self.request.url.path,
            "authenticated": session.is_authenticated,
            "is_admin": session.is_admin,
            "has_completed_profile": session.has_completed_profile,
            "user": session.user,
            "notifications": [*self.flashed, *self.notifier.drain()],
            **payload,
        }
        response = JSONResponse(
            jsonable_encoder(body, by_alias=False), status_code=status_code
        )
        if self.flashed:
            clear_flash(response)
        self.token_store.apply(response, self.container.settings)
        return response

    def redirect(self, location: str | None = None) -> Response:
        """Redirect, carrying pending notifications to the next page."""
        target = location or self.navigator.location or HOME_PATH
        response = RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
        write_flash(
            response,
            [*self.flashed, *self.notifier.drain()],
            self.container.settings,
        )
        self.token_store.apply(response, self.container.settings)
        return response


async def open_page(request: Request) -> PageContext:
    """Restore the visitor's session and apply route protection."""
    container: AppContainer = request.app.state.container
    token_store = CookieTokenStore.from_request(
        request, container.settings.token_cookie_name
    )
    notifier = RecordingNotifier()
    navigator = RecordingNavigator()
    services = container.services_for(token_store, notifier, navigator)
    await services.session.initialize()
    services.session.protect_route(request.url.path)
    return PageContext(
        request=request,
        container=container,
        services=services,
        token_store=token_store,
        notifier=notifier,
        navigator=navigator,
        flashed=read_flash(request, container.settings),
    )


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def home(page: PageContext = Depends(open_page)) -> Response:
        """Featured foods, categories and the recommender's method."""
        if page.redirecting:
            return page.redirect()
        payload: dict[str, object] = {
            "featured_foods": [],
            "categories": [],
            "method_info": None,
        }
        try:
            foods = await page.services.foods.list_foods(
                FoodQuery(per_page=FEATURED_FOODS)
            )
            payload["featured_foods"] = [food_card(food) for food in foods.foods]
            payload["categories"] = await page.services.foods.list_categories()
        except API_FAILURES as exc:
            _logger.warning("Loading home page data failed: %s", exc)
            page.notify_error(exc, "Could not load data.")
        if page.services.session.is_authenticated:
            try:
                payload["method_info"] = (
                    await page.services.recommendations.method_info()
                )
            except API_FAILURES as exc:
                _logger.warning("Loading recommendation method failed: %s", exc)
        return page.render(payload)

    @app.get("/foods")
    async def foods(
        page_number: int = Query(default=1, alias="page"),
        search: str | None = None,
        category_id: int | None = None,
        page: PageContext = Depends(open_page),
    ) -> Response:
        """Searchable, paginated food catalogue."""
        if page.redirecting:
            return page.redirect()
        query = FoodQuery(
            page=max(page_number, 1),
            per_page=page.container.settings.foods_per_page,
            category_id=category_id,
            search=search,
        )
        payload: dict[str, object] = {"query": query, "foods": [], "categories": []}
        try:
            payload["categories"] = await page.services.foods.list_categories()
        except API_FAILURES as exc:
            _logger.warning("Loading categories failed: %s", exc)
        try:
            result = await page.services.foods.list_foods(query)
        except API_FAILURES as exc:
            _logger.warning("Loading foods failed: %s", exc)
            page.notify_error(exc, "Could not load foods.")
            payload["error"] = api_error_message(exc)
            return page.render(payload)
        payload.update(
            foods=[food_card(food) for food in result.foods],
            current_page=result.current_page,
            total=result.total,
            total_pages=result.total_pages,
            has_next=result.has_next,
        )
        return page.render(payload)

    @app.get("/foods/{food_id}")
    async def food_detail(
        food_id: int, page: PageContext = Depends(open_page)
    ) -> Response:
        """A food with its nutrients, suitability and similar foods."""
        if page.redirecting:
            return page.redirect()
        try:
            food = await page.services.foods.get_food(food_id)
        except API_FAILURES as exc:
            _logger.warning("Loading food %s failed: %s", food_id, exc)
            page.notify_error(exc, "Could not load food details.")
            return page.redirect("/foods")
        similar: list[object] = []
        if page.services.session.is_authenticated:
            try:
                result = await page.services.recommendations.similar_foods(
                    food_id, limit=SIMILAR_FOODS
                )
                similar = [food_card(item) for item in result.similar_foods]
            except API_FAILURES as exc:
                _logger.warning("Loading similar foods failed: %s", exc)
        return page.render({"food": food, "card": food_card(food), "similar": similar})

    @app.post("/foods/{food_id}/rate")
    async def rate_food(
        food_id: int,
        submission: RatingSubmission,
        page: PageContext = Depends(open_page),
    ) -> Response:
        """Rate or like a food."""
        if page.redirecting:
            return page.redirect()
        if not page.services.session.is_authenticated:
            page.notifier.notify(
                NotificationLevel.ERROR, "Please log in to rate foods."
            )
            return page.render({"rated": False}, status.HTTP_401_UNAUTHORIZED)
        is_liked = submission.is_liked
        if is_liked is None:
            is_liked = liked_from_rating(submission.rating)
        request = RatingRequest(rating=submission.rating, is_liked=is_liked)
        try:
            message = await page.services.foods.rate_food(food_id, request)
        except API_FAILURES as exc:
            _logger.warning("Rating food %s failed: %s", food_id, exc)
            page.notify_error(exc)
            return page.render({"rated": False}, status.HTTP_502_BAD_GATEWAY)
        page.notifier.notify(NotificationLevel.SUCCESS, message or "Rating saved!")
        return page.render(
            {"rated": True, "rating": submission.rating, "liked": is_liked}
        )

    @app.get("/favorites")
    async def favorites(
        search: str | None = None,
        filter_by: FavoriteFilter = FavoriteFilter.ALL,
        sort_by: FavoriteSort = FavoriteSort.RATING,
        page: PageContext = Depends(open_page),
    ) -> Response:
        """Foods the user rated well or liked."""
        if page.redirecting:
            return page.redirect()
        try:
            ratings = favorite_ratings(await page.services.foods.my_ratings())
        except API_FAILURES as exc:
            _logger.warning("Loading favorites failed: %s", exc)
            page.notify_error(exc, "Could not load favorite foods.")
            return page.render({"favorites": [], "total": 0, "error": True})
        shown = filter_favorites(ratings, search, filter_by, sort_by)
        return page.render(
            {
                "favorites": shown,
                "total": len(ratings),
                "liked": sum(1 for rating in ratings if rating.is_liked),
            }
        )

    @app.get("/recommendations")
    async def recommendations(
        method: RecommendationMethod | None = None,
        generate: bool = False,
        page: PageContext = Depends(open_page),
    ) -> Response:
        """Recommender status and, on request, fresh recommendations."""
        if page.redirecting:
            return page.redirect()
        services = page.services
        user = services.session.user
        payload: dict[str, object] = {
            "method_info": None,
            "user_stats": None,
            "recommendations": [],
            "profile_requirements": _profile_requirements(page),
        }
        try:
            payload["method_info"] = await services.recommendations.method_info()
            payload["user_stats"] = await services.recommendations.user_stats()
        except API_FAILURES as exc:
            _logger.warning("Loading recommendation info failed: %s", exc)
        if not generate:
            return page.render(payload)
        if user is None or not (user.height_cm and user.weight_kg):
            page.notifier.notify(
                NotificationLevel.ERROR,
                "Complete your profile first to get recommendations.",
            )
            return page.render(payload)
        limit = page.container.settings.recommendation_limit
        try:
            if method is RecommendationMethod.CONTENT_BASED:
                result = await services.recommendations.content_based(limit)
            elif method is RecommendationMethod.COLLABORATIVE:
                result = await services.recommendations.collaborative(limit)
            elif method is RecommendationMethod.HYBRID:
                result = await services.recommendations.hybrid(limit)
            else:
                result = await services.recommendations.smart(limit=limit)
        except API_FAILURES as exc:
            _logger.warning("Loading recommendations failed: %s", exc)
            page.notify_error(exc, "Could not get recommendations.")
            return page.render(payload)
        payload["recommendations"] = [
            food_card(food) for food in result.recommendations
        ]
        payload["method_used"] = result.method
        page.notifier.notify(NotificationLevel.SUCCESS, "Recommendations are ready!")
        return page.render(payload)

    @app.get("/meal-planning")
    async def meal_planning(
        plan_date: date | None = None, page: PageContext = Depends(open_page)
    ) -> Response:
        """The meal plan for a date."""
        if page.redirecting:
            return page.redirect()
        selected = (plan_date or date.today()).isoformat()
        try:
            plan = await page.services.meal_planning.get_daily_plan(selected)
        except API_FAILURES as exc:
            _logger.warning("Loading meal plan failed: %s", exc)
            return page.render(_meal_plan_error(selected, exc))
        return page.render(_meal_plan_payload(selected, plan))

    @app.post("/meal-planning/generate")
    async def generate_meal_plan(
        request: MealPlanRequest, page: PageContext = Depends(open_page)
    ) -> Response:
        """Generate, or regenerate, a daily plan."""
        if page.redirecting:
            return page.redirect()
        selected = request.date or date.today().isoformat()
        resolved = request.model_copy(update={"date": selected})
        try:
            generated = await page.services.meal_planning.generate_daily_plan(resolved)
        except API_FAILURES as exc:
            _logger.warning("Generating meal plan failed: %s", exc)
            return page.render(_meal_plan_error(selected, exc))
        payload = _meal_plan_payload(selected, generated.meal_plan)
        payload["tips"] = generated.tips
        if generated.message:
            page.notifier.notify(NotificationLevel.SUCCESS, generated.message)
        return page.render(payload)

    @app.post("/meal-planning/complete")
    async def complete_meal(
        request: MealCompletionRequest, page: PageContext = Depends(open_page)
    ) -> Response:
        """Mark a meal as eaten or not eaten."""
        if page.redirecting:
            return page.redirect()
        resolved = request.model_copy(
            update={"date": request.date or date.today().isoformat()}
        )
        try:
            result = await page.services.meal_planning.mark_meal_completed(resolved)
        except API_FAILURES as exc:
            _logger.warning("Marking meal failed: %s", exc)
            page.notify_error(exc)
            return page.render({"completion": None}, status.HTTP_502_BAD_GATEWAY)
        return page.render({"completion": result})

    @app.get("/login")
    async def login_page(
        redirect: str | None = None, page: PageContext = Depends(open_page)
    ) -> Response:
        """Login form."""
        if page.redirecting:
            return page.redirect()
        return page.render({"redirect": safe_redirect_target(redirect)})

    @app.post("/login")
    async def login(
        form: LoginRequest, page: PageContext = Depends(open_page)
    ) -> Response:
        """Log in and return to the page that asked for it."""
        if page.redirecting:
            return page.redirect()
        credentials = LoginCredentials(email=form.email, password=form.password)
        if await page.services.session.login(credentials):
            return page.redirect(safe_redirect_target(form.redirect))
        return page.render(
            {"redirect": safe_redirect_target(form.redirect)},
            status.HTTP_401_UNAUTHORIZED,
        )

    @app.get("/register")
    async def register_page(page: PageContext = Depends(open_page)) -> Response:
        """Registration form."""
        if page.redirecting:
            return page.redirect()
        return page.render({})

    @app.post("/register")
    async def register(
        form: RegistrationForm, page: PageContext = Depends(open_page)
    ) -> Response:
        """Create an account."""
        if page.redirecting:
            return page.redirect()
        if await page.services.session.register(form):
            return page.redirect(HOME_PATH)
        return page.render({}, status.HTTP_400_BAD_REQUEST)

    @app.post("/logout")
    async def logout(page: PageContext = Depends(open_page)) -> Response:
        """End the session."""
        page.services.session.logout()
        return page.redirect()

    @app.get("/profile")
    async def profile(page: PageContext = Depends(open_page)) -> Response:
        """Profile, BMI and medical conditions."""
        if page.redirecting:
            return page.redirect()
        payload = _profile_payload(page)
        try:
            payload["medical_conditions"] = (
                await page.services.users.medical_conditions()
            )
            payload["my_medical_conditions"] = (
                await page.services.users.my_medical_conditions()
            )
        except API_FAILURES as exc:
            _logger.warning("Loading profile data failed: %s", exc)
            page.notify_error(exc, "Could not load profile data.")
        return page.render(payload)

    @app.put("/profile")
    async def update_profile(
        update: ProfileUpdate, page: PageContext = Depends(open_page)
    ) -> Response:
        """Save profile edits."""
        if page.redirecting:
            return page.redirect()
        try:
            await page.services.users.update_profile(update)
        except API_FAILURES as exc:
            _logger.warning("Updating profile failed: %s", exc)
            page.notifier.notify(
                NotificationLevel.ERROR,
                f"Could not update profile: {api_error_message(exc)}",
            )
            return page.render(_profile_payload(page), status.HTTP_400_BAD_REQUEST)
        await page.services.session.refresh_user()
        if page.services.session.is_authenticated:
            page.notifier.notify(NotificationLevel.SUCCESS, "Profile updated!")
        return page.render(_profile_payload(page))

    @app.post("/profile/medical-conditions/{condition_id}/toggle")
    async def toggle_medical_condition(
        condition_id: int, page: PageContext = Depends(open_page)
    ) -> Response:
        """Attach or detach a medical condition."""
        if page.redirecting:
            return page.redirect()
        users = page.services.users
        try:
            available = await users.medical_conditions()
            current = await users.my_medical_conditions()
            condition = next(
                (item for item in available if item.condition_id == condition_id),
                None,
            )
            if condition is None:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
            updated = await users.toggle_medical_condition(condition, current)
        except API_FAILURES as exc:
            _logger.warning("Updating medical conditions failed: %s", exc)
            page.notify_error(exc, "Could not update medical conditions.")
            return page.render({"my_medical_conditions": None})
        attached = any(item.condition_id == condition_id for item in updated)
        verb = "added to" if attached else "removed from"
        page.notifier.notify(
            NotificationLevel.SUCCESS,
            f"{condition.condition_name} {verb} your medical conditions",
        )
        return page.render({"my_medical_conditions": updated})

    @app.get("/admin")
    async def admin(page: PageContext = Depends(open_page)) -> Response:
        """System-wide recommender statistics and API health."""
        if page.redirecting:
            return page.redirect()
        payload: dict[str, object] = {"system_stats": None, "api_health": None}
        try:
            payload["api_health"] = await page.services.system.health()
        except API_FAILURES as exc:
            _logger.warning("API health check failed: %s", exc)
        try:
            payload["system_stats"] = (
                await page.services.recommendations.system_stats()
            )
        except API_FAILURES as exc:
            _logger.warning("Loading system stats failed: %s", exc)
            page.notify_error(exc)
        return page.render(payload)

    return app


def _profile_requirements(page: PageContext) -> list[dict[str, object]]:
    user = page.services.session.user
    return [
        {"label": "Height", "completed": bool(user and user.height_cm)},
        {"label": "Weight", "completed": bool(user and user.weight_kg)},
        {"label": "BMR", "completed": bool(user and user.bmr)},
    ]


def _profile_payload(page: PageContext) -> dict[str, object]:
    user = page.services.session.user
    bmi = body_mass_index(user.weight_kg, user.height_cm) if user else None
    return {
        "bmi": bmi,
        "bmi_category": bmi_category(bmi) if bmi is not None else None,
    }


def _meal_plan_error(selected: str, exc: Exception) -> dict[str, object]:
    return {"date": selected, "plan": None, "error": api_error_message(exc)}


def _meal_plan_payload(selected: str, plan: DailyMealPlan | None) -> dict[str, object]:
    if plan is None:
        return {"date": selected, "plan": None, "completed": 0, "total": 3}
    completed, total = meal_completion(plan)
    return {
        "date": selected,
        "plan": plan,
        "approach": approach_label(plan.approach),
        "completed": completed,
        "total": total,
    }
