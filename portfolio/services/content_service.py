"""Portfolio content (profile, skills, projects, ...) read through the TTL cache."""
import asyncio
import logging

import httpx
from pydantic import BaseModel

from portfolio.core.cache import MemoryCache
from portfolio.core.cached_data import CachedData, CachedDataOptions, meta_key
from portfolio.core.config import settings
from portfolio.core.errors import FetchError, UnknownCategoryError, UnknownSectionError
from portfolio.core.fetch import get_json
from portfolio.models.schemas import (
    Certification,
    Profile,
    Project,
    Skill,
    SkillCategory,
    TimelinePost,
)

logger = logging.getLogger(__name__)

# section name -> (model, endpoint returns a list)
SECTIONS: dict[str, tuple[type[BaseModel], bool]] = {
    "profile": (Profile, False),
    "skills": (Skill, True),
    "projects": (Project, True),
    "timelineposts": (TimelinePost, True),
    "certifications": (Certification, True),
}

ALL_SKILLS = "all"


def section_key(name: str) -> str:
    return f"section:{name}"


def filtered_skills_key(category: str) -> str:
    return f"filteredSkills:{category.lower()}"


def check_category(category: str) -> None:
    """Raise UnknownCategoryError unless category is "all" or a SkillCategory (any case)."""
    if category.lower() != ALL_SKILLS and category.upper() not in SkillCategory.__members__:
        raise UnknownCategoryError(category)


class ContentService:
    def __init__(
        self,
        cache: MemoryCache,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        cache_time: float | None = None,
        stale_time: float | None = None,
    ):
        self.cache = cache
        self.base_url = (base_url or settings.PORTFOLIO_API_URL).rstrip("/")
        self.client = client
        self.cache_time = settings.CACHE_TIME if cache_time is None else cache_time
        self.stale_time = settings.STALE_TIME if stale_time is None else stale_time
        self._background: set[asyncio.Task] = set()

    def section(self, name: str, options: CachedDataOptions | None = None) -> CachedData:
        """A fresh CachedData for one section. State is per instance, the store is shared."""
        if name not in SECTIONS:
            raise UnknownSectionError(name)
        if options is None:
            options = CachedDataOptions(cache_time=self.cache_time, stale_time=self.stale_time)
        return CachedData(self.cache, section_key(name), lambda: self._load(name), options)

    async def get_section(self, name: str):
        """Return section content, serving a cached copy while it revalidates."""
        query = self.section(name)
        async with query:
            pass
        for task in query.pending_tasks:
            self._track(task)

        if query.data is None and query.error is not None:
            raise query.error
        return query.data

    async def refresh_section(self, name: str):
        """Bypass the cache and reload one section. Raises FetchError on failure."""
        return await self.section(name).refetch()

    async def get_filtered_skills(self, category: str = ALL_SKILLS) -> list[Skill]:
        check_category(category)
        skills = await self.get_section("skills")
        return self.filter_skills(skills, category)

    def filter_skills(self, skills: list[Skill], category: str = ALL_SKILLS) -> list[Skill]:
        """Skills in one category ("all" for every skill), memoised per category.

        Only known categories get a memo, so the key space stays bounded.
        """
        check_category(category)
        cache_key = filtered_skills_key(category)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        wanted = category.upper()
        filtered = [
            s for s in skills
            if category.lower() == ALL_SKILLS or s.category.value == wanted
        ]
        self.cache.set(cache_key, filtered, settings.FILTERED_SKILLS_CACHE_TIME)
        return filtered

    def invalidate(self, name: str | None = None) -> None:
        """Drop one section (value and timestamp) or, with no name, the whole cache."""
        if name is None:
            self.cache.clear_all()
            logger.info("Cache cleared")
            return
        if name not in SECTIONS:
            raise UnknownSectionError(name)
        self.cache.clear(section_key(name))
        self.cache.clear(meta_key(section_key(name)))
        if name == "skills":
            self._clear_filtered_skills()
        logger.info(f"Cache cleared for section {name}")

    async def close(self) -> None:
        """Cancel background revalidations still in flight."""
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        self._background.clear()

    # --- Internals ---

    async def _load(self, name: str):
        model, many = SECTIONS[name]
        url = f"{self.base_url}/{name}"
        logger.info(f"Loading section {name} from {url}")
        payload = await get_json(url, client=self.client)

        if many:
            if not isinstance(payload, list):
                raise FetchError(f"Expected a list from {url}", key=section_key(name))
            result = [model.model_validate(item) for item in payload]
        else:
            result = model.model_validate(payload)

        if name == "skills":
            self._clear_filtered_skills()
        return result

    def _clear_filtered_skills(self) -> None:
        for category in [ALL_SKILLS, *(c.value for c in SkillCategory)]:
            self.cache.clear(filtered_skills_key(category))

    def _track(self, task: asyncio.Task) -> None:
        self._background.add(task)
        task.add_done_callback(self._background.discard)
