# wikiportraits/core/categories/soccer.py
"""Commons category rules for soccer matches."""
from typing import Any, Dict, List, Optional

from wikiportraits.core.domain.dates import format_date_for_display, parse_date, year_of
from wikiportraits.core.domain.models import CategoryCreationInfo


def _team_name(team: Optional[Dict[str, Any]]) -> Optional[str]:
    return (team or {}).get("name")


def generate_soccer_categories(
    match_data: Dict[str, Any],
    selected_players: List[Dict[str, Any]],
    include_player: bool = True,
    include_team: bool = True,
    include_match: bool = True,
) -> List[str]:
    categories = {"WikiPortraits"}
    home = _team_name(match_data.get("homeTeam"))
    away = _team_name(match_data.get("awayTeam"))
    year = year_of(match_data.get("date"))

    if include_match and home and away:
        match_category = f"{home} vs {away}"
        categories.add(match_category)
        if year:
            categories.add(f"{match_category} {year}")

        competition = match_data.get("competition")
        if competition:
            categories.add(f"{competition} matches")
            if year:
                categories.add(f"{competition} {year}")

        if match_data.get("venue"):
            categories.add(f"Matches at {match_data['venue']}")

    if include_team:
        for team in (home, away):
            if team:
                categories.add(f"{team} matches")
                categories.add(f"Players of {team}")

    if include_player:
        for player in selected_players:
            team = player.get("team")
            categories.add(player["name"])
            categories.add(f"Players of {team}")
            if player.get("position"):
                categories.add(f"{player['position']}s")
                categories.add(f"{team} {player['position']}s")

    return sorted(categories)


def get_categories_to_create(
    match_data: Dict[str, Any], selected_players: List[Dict[str, Any]]
) -> List[CategoryCreationInfo]:
    result = []
    seen_teams = set()

    for team in (_team_name(match_data.get("homeTeam")), _team_name(match_data.get("awayTeam"))):
        if not team or team in seen_teams:
            continue
        seen_teams.add(team)
        result.append(CategoryCreationInfo(
            categoryName=f"Players of {team}",
            parentCategory=team,
            description=f"Players of [[{team}]].",
            teamName=team,
        ))

    for player in selected_players:
        position = f", {player['position']}" if player.get("position") else ""
        result.append(CategoryCreationInfo(
            categoryName=player["name"],
            parentCategory=f"Players of {player.get('team')}",
            description=f"[[{player['name']}]]{position} of [[{player.get('team')}]].",
            teamName=player.get("team"),
        ))

    home = _team_name(match_data.get("homeTeam"))
    away = _team_name(match_data.get("awayTeam"))
    year = year_of(match_data.get("date"))
    if home and away and year:
        venue = f" at {match_data['venue']}" if match_data.get("venue") else ""
        result.append(CategoryCreationInfo(
            categoryName=f"{home} vs {away} {year}",
            parentCategory=f"{home} vs {away}",
            description=f"Match between [[{home}]] and [[{away}]] in {year}{venue}.",
        ))

    return result


def generate_match_page_category(match_data: Dict[str, Any]) -> str:
    home = _team_name(match_data.get("homeTeam"))
    away = _team_name(match_data.get("awayTeam"))
    if not home or not away:
        return "Unnamed Match"

    name = f"{home} vs {away}"
    played = parse_date(match_data.get("date"))
    if played:
        name += f" ({played.month}/{played.day}/{played.year})"
    if match_data.get("competition"):
        name += f" - {match_data['competition']}"
    return name


def generate_match_description(match_data: Dict[str, Any]) -> str:
    home = _team_name(match_data.get("homeTeam"))
    away = _team_name(match_data.get("awayTeam"))
    if not home or not away:
        return "Soccer match photos"

    description = f"Photos from the soccer match between {home} and {away}"
    if match_data.get("date"):
        description += f" on {format_date_for_display(match_data['date'], 'full')}"
    if match_data.get("venue"):
        description += f" at {match_data['venue']}"
    if match_data.get("competition"):
        description += f" ({match_data['competition']})"
    if match_data.get("result"):
        description += f". Final score: {match_data['result']}"
    return description + "."


def generate_player_description(player: Dict[str, Any], match_data: Optional[Dict[str, Any]] = None) -> str:
    description = player["name"]
    if player.get("position"):
        description += f", {player['position']}"
    description += f" of {player.get('team')}"

    home = _team_name((match_data or {}).get("homeTeam"))
    away = _team_name((match_data or {}).get("awayTeam"))
    if home and away:
        opponent = away if player.get("team") == home else home
        description += f" during the match against {opponent}"
        if match_data.get("date"):
            description += f" on {format_date_for_display(match_data['date'], 'full')}"

    return description + "."
