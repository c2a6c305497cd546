# wikiportraits/shared/container.py
from dependency_injector import containers, providers

from wikiportraits.adapters.mediawiki.commons import CommonsAdapter
from wikiportraits.adapters.mediawiki.wikidata import WikidataAdapter
from wikiportraits.adapters.mediawiki.wikipedia import WikipediaAdapter
from wikiportraits.core.categories.generator import CategoryGenerator
from wikiportraits.core.use_cases import (
    CreateCategory,
    CreateClaim,
    CreateEntity,
    CreateTemplate,
    EditFilePage,
    GetBandMembers,
    GetEntitySummary,
    PlanEventCategories,
    SearchArtists,
    SearchMusicArticles,
    SearchTeamPlayers,
    SearchWikidata,
    SearchWikipedia,
    UpdateCaptions,
    UpdateDepicts,
    UpdateInfoboxImage,
    UploadImage,
)
from wikiportraits.shared.config import settings


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    Gateways are singletons (they hold the category cache and the circuit
    breakers); use cases are built per request.
    """

    # 1. Configuration
    config = providers.Configuration(pydantic_settings=[settings])

    # 2. Gateways (Infrastructure Adapters)
    commons_gateway = providers.Singleton(CommonsAdapter)
    wikidata_gateway = providers.Singleton(WikidataAdapter)
    wikipedia_gateway = providers.Singleton(WikipediaAdapter)

    # Keeps its template registry and generation history across requests
    category_generator = providers.Singleton(CategoryGenerator, commons=commons_gateway)

    # 3. Use Cases
    upload_image_use_case = providers.Factory(UploadImage, commons=commons_gateway)
    create_category_use_case = providers.Factory(CreateCategory, commons=commons_gateway)
    edit_file_page_use_case = providers.Factory(EditFilePage, commons=commons_gateway)
    update_captions_use_case = providers.Factory(UpdateCaptions, commons=commons_gateway)
    update_depicts_use_case = providers.Factory(UpdateDepicts, commons=commons_gateway)
    create_template_use_case = providers.Factory(CreateTemplate, commons=commons_gateway)

    create_claim_use_case = providers.Factory(CreateClaim, wikidata=wikidata_gateway)
    create_entity_use_case = providers.Factory(CreateEntity, wikidata=wikidata_gateway)

    update_infobox_use_case = providers.Factory(UpdateInfoboxImage, wikipedia=wikipedia_gateway)

    plan_event_categories_use_case = providers.Factory(
        PlanEventCategories,
        commons=commons_gateway,
        wikidata=wikidata_gateway,
    )

    # 4. Lookups
    search_wikidata_use_case = providers.Factory(SearchWikidata, wikidata=wikidata_gateway)
    get_entity_summary_use_case = providers.Factory(GetEntitySummary, wikidata=wikidata_gateway)
    search_artists_use_case = providers.Factory(SearchArtists, wikidata=wikidata_gateway)
    search_wikipedia_use_case = providers.Factory(SearchWikipedia, wikipedia=wikipedia_gateway)
    get_band_members_use_case = providers.Factory(GetBandMembers, wikidata=wikidata_gateway)
    search_team_players_use_case = providers.Factory(SearchTeamPlayers, wikipedia=wikipedia_gateway)
    search_music_articles_use_case = providers.Factory(SearchMusicArticles, wikipedia=wikipedia_gateway)


container = Container()
