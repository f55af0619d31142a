"""
Location Extraction

Finds a Bay Area ZIP code, city, or county mentioned in a query using static
lookup tables. No model call is involved.

Matching is a plain case-insensitive substring scan, so a city name embedded
in another word (e.g. "Ross" in "across") matches too.
"""

import re
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Optional

logger = logging.getLogger(__name__)

ZIP_PATTERN = re.compile(r"\b(\d{5})\b")

ZIP_TO_CITY: Dict[str, str] = {
    # Alameda County
    "94501": "Alameda",
    "94502": "Alameda",
    "94536": "Fremont",
    "94537": "Fremont",
    "94538": "Fremont",
    "94539": "Fremont",
    "94540": "Hayward",
    "94541": "Hayward",
    "94542": "Hayward",
    "94543": "Hayward",
    "94544": "Hayward",
    "94545": "Hayward",
    "94546": "Castro Valley",
    "94550": "Livermore",
    "94551": "Livermore",
    "94552": "Castro Valley",
    "94555": "Fremont",
    "94557": "Hayward",
    "94560": "Newark",
    "94566": "Pleasanton",
    "94568": "Dublin",
    "94577": "San Leandro",
    "94578": "San Leandro",
    "94579": "San Leandro",
    "94580": "San Lorenzo",
    "94586": "Sunol",
    "94587": "Union City",
    "94588": "Pleasanton",
    "94601": "Oakland",
    "94602": "Oakland",
    "94603": "Oakland",
    "94605": "Oakland",
    "94606": "Oakland",
    "94607": "Oakland",
    "94608": "Emeryville",
    "94609": "Oakland",
    "94610": "Oakland",
    "94611": "Oakland",
    "94612": "Oakland",
    "94613": "Oakland",
    "94618": "Oakland",
    "94619": "Oakland",
    "94620": "Piedmont",
    "94621": "Oakland",
    "94702": "Berkeley",
    "94703": "Berkeley",
    "94704": "Berkeley",
    "94705": "Berkeley",
    "94706": "Albany",
    "94707": "Berkeley",
    "94708": "Berkeley",
    "94709": "Berkeley",
    "94710": "Berkeley",
    # Contra Costa County
    "94505": "Discovery Bay",
    "94506": "Danville",
    "94507": "Alamo",
    "94509": "Antioch",
    "94511": "Bethel Island",
    "94513": "Brentwood",
    "94514": "Byron",
    "94516": "Canyon",
    "94517": "Clayton",
    "94518": "Concord",
    "94519": "Concord",
    "94520": "Concord",
    "94521": "Concord",
    "94522": "Concord",
    "94523": "Pleasant Hill",
    "94524": "Concord",
    "94525": "Crockett",
    "94526": "Danville",
    "94527": "Concord",
    "94528": "Diablo",
    "94529": "Concord",
    "94530": "El Cerrito",
    "94531": "Antioch",
    "94547": "Hercules",
    "94548": "Knightsen",
    "94549": "Lafayette",
    "94553": "Martinez",
    "94556": "Moraga",
    "94561": "Oakley",
    "94563": "Orinda",
    "94564": "Pinole",
    "94565": "Pittsburg",
    "94569": "Port Costa",
    "94570": "Moraga",
    "94572": "Rodeo",
    "94575": "Moraga",
    "94582": "San Ramon",
    "94583": "San Ramon",
    "94595": "Walnut Creek",
    "94596": "Walnut Creek",
    "94597": "Walnut Creek",
    "94598": "Walnut Creek",
    "94801": "Richmond",
    "94802": "Richmond",
    "94803": "El Sobrante",
    "94804": "Richmond",
    "94805": "Richmond",
    "94806": "San Pablo",
    "94820": "Richmond",
    "94850": "Richmond",
    # Marin County
    "94901": "San Rafael",
    "94903": "San Rafael",
    "94904": "Greenbrae",
    "94920": "Belvedere Tiburon",
    "94925": "Corte Madera",
    "94930": "Fairfax",
    "94939": "Larkspur",
    "94941": "Mill Valley",
    "94945": "Novato",
    "94947": "Novato",
    "94949": "Novato",
    "94957": "Ross",
    "94960": "San Anselmo",
    "94965": "Sausalito",
    # Napa County
    "94503": "American Canyon",
    "94558": "Napa",
    "94559": "Napa",
    "94574": "St. Helena",
    "94599": "Yountville",
    "94515": "Calistoga",
    # San Francisco
    "94102": "San Francisco",
    "94103": "San Francisco",
    "94104": "San Francisco",
    "94105": "San Francisco",
    "94107": "San Francisco",
    "94108": "San Francisco",
    "94109": "San Francisco",
    "94110": "San Francisco",
    "94111": "San Francisco",
    "94112": "San Francisco",
    "94114": "San Francisco",
    "94115": "San Francisco",
    "94116": "San Francisco",
    "94117": "San Francisco",
    "94118": "San Francisco",
    "94121": "San Francisco",
    "94122": "San Francisco",
    "94123": "San Francisco",
    "94124": "San Francisco",
    "94127": "San Francisco",
    "94129": "San Francisco",
    "94130": "San Francisco",
    "94131": "San Francisco",
    "94132": "San Francisco",
    "94133": "San Francisco",
    "94134": "San Francisco",
    "94158": "San Francisco",
    # San Mateo County
    "94002": "Belmont",
    "94005": "Brisbane",
    "94010": "Burlingame",
    "94014": "Daly City",
    "94015": "Daly City",
    "94019": "Half Moon Bay",
    "94025": "Menlo Park",
    "94027": "Atherton",
    "94028": "Portola Valley",
    "94030": "Millbrae",
    "94044": "Pacifica",
    "94061": "Redwood City",
    "94062": "Redwood City",
    "94063": "Redwood City",
    "94065": "Redwood City",
    "94066": "San Bruno",
    "94070": "San Carlos",
    "94080": "South San Francisco",
    "94303": "East Palo Alto",
    "94401": "San Mateo",
    "94402": "San Mateo",
    "94403": "San Mateo",
    "94404": "Foster City",
    # Santa Clara County
    "94022": "Los Altos",
    "94024": "Los Altos",
    "94040": "Mountain View",
    "94041": "Mountain View",
    "94043": "Mountain View",
    "94085": "Sunnyvale",
    "94086": "Sunnyvale",
    "94087": "Sunnyvale",
    "94089": "Sunnyvale",
    "94301": "Palo Alto",
    "94304": "Palo Alto",
    "94306": "Palo Alto",
    "95002": "Alviso",
    "95008": "Campbell",
    "95014": "Cupertino",
    "95020": "Gilroy",
    "95030": "Los Gatos",
    "95032": "Los Gatos",
    "95035": "Milpitas",
    "95037": "Morgan Hill",
    "95050": "Santa Clara",
    "95051": "Santa Clara",
    "95054": "Santa Clara",
    "95070": "Saratoga",
    "95110": "San Jose",
    "95111": "San Jose",
    "95112": "San Jose",
    "95113": "San Jose",
    "95116": "San Jose",
    "95117": "San Jose",
    "95118": "San Jose",
    "95119": "San Jose",
    "95120": "San Jose",
    "95121": "San Jose",
    "95122": "San Jose",
    "95123": "San Jose",
    "95124": "San Jose",
    "95125": "San Jose",
    "95126": "San Jose",
    "95127": "San Jose",
    "95128": "San Jose",
    "95129": "San Jose",
    "95130": "San Jose",
    "95131": "San Jose",
    "95132": "San Jose",
    "95133": "San Jose",
    "95134": "San Jose",
    "95135": "San Jose",
    "95136": "San Jose",
    "95138": "San Jose",
    "95139": "San Jose",
    "95148": "San Jose",
    # Solano County
    "94510": "Benicia",
    "94533": "Fairfield",
    "94534": "Fairfield",
    "94585": "Suisun City",
    "94589": "Vallejo",
    "94590": "Vallejo",
    "94591": "Vallejo",
    "95687": "Vacaville",
    "95688": "Vacaville",
    "95620": "Dixon",
    "94571": "Rio Vista",
    # Sonoma County
    "94928": "Rohnert Park",
    "94931": "Cotati",
    "94952": "Petaluma",
    "94954": "Petaluma",
    "95401": "Santa Rosa",
    "95403": "Santa Rosa",
    "95404": "Santa Rosa",
    "95405": "Santa Rosa",
    "95407": "Santa Rosa",
    "95409": "Santa Rosa",
    "95425": "Cloverdale",
    "95436": "Forestville",
    "95446": "Guerneville",
    "95448": "Healdsburg",
    "95472": "Sebastopol",
    "95476": "Sonoma",
    "95492": "Windsor",
}

CITY_TO_COUNTY: Dict[str, str] = {
    # Alameda County
    "Alameda": "Alameda County",
    "Albany": "Alameda County",
    "Berkeley": "Alameda County",
    "Castro Valley": "Alameda County",
    "Dublin": "Alameda County",
    "Emeryville": "Alameda County",
    "Fremont": "Alameda County",
    "Hayward": "Alameda County",
    "Livermore": "Alameda County",
    "Newark": "Alameda County",
    "Oakland": "Alameda County",
    "Piedmont": "Alameda County",
    "Pleasanton": "Alameda County",
    "San Leandro": "Alameda County",
    "San Lorenzo": "Alameda County",
    "Sunol": "Alameda County",
    "Union City": "Alameda County",
    # Contra Costa County
    "Alamo": "Contra Costa County",
    "Antioch": "Contra Costa County",
    "Bethel Island": "Contra Costa County",
    "Brentwood": "Contra Costa County",
    "Byron": "Contra Costa County",
    "Canyon": "Contra Costa County",
    "Clayton": "Contra Costa County",
    "Concord": "Contra Costa County",
    "Crockett": "Contra Costa County",
    "Danville": "Contra Costa County",
    "Diablo": "Contra Costa County",
    "Discovery Bay": "Contra Costa County",
    "El Cerrito": "Contra Costa County",
    "El Sobrante": "Contra Costa County",
    "Hercules": "Contra Costa County",
    "Knightsen": "Contra Costa County",
    "Lafayette": "Contra Costa County",
    "Martinez": "Contra Costa County",
    "Moraga": "Contra Costa County",
    "Oakley": "Contra Costa County",
    "Orinda": "Contra Costa County",
    "Pinole": "Contra Costa County",
    "Pittsburg": "Contra Costa County",
    "Pleasant Hill": "Contra Costa County",
    "Port Costa": "Contra Costa County",
    "Richmond": "Contra Costa County",
    "Rodeo": "Contra Costa County",
    "San Pablo": "Contra Costa County",
    "San Ramon": "Contra Costa County",
    "Walnut Creek": "Contra Costa County",
    # Marin County
    "Belvedere": "Marin County",
    "Belvedere Tiburon": "Marin County",
    "Corte Madera": "Marin County",
    "Fairfax": "Marin County",
    "Greenbrae": "Marin County",
    "Larkspur": "Marin County",
    "Mill Valley": "Marin County",
    "Novato": "Marin County",
    "Ross": "Marin County",
    "San Anselmo": "Marin County",
    "San Rafael": "Marin County",
    "Sausalito": "Marin County",
    "Tiburon": "Marin County",
    # Napa County
    "American Canyon": "Napa County",
    "Calistoga": "Napa County",
    "Napa": "Napa County",
    "St. Helena": "Napa County",
    "Yountville": "Napa County",
    # San Francisco
    "San Francisco": "San Francisco",
    "SF": "San Francisco",
    # San Mateo County
    "Atherton": "San Mateo County",
    "Belmont": "San Mateo County",
    "Brisbane": "San Mateo County",
    "Burlingame": "San Mateo County",
    "Daly City": "San Mateo County",
    "East Palo Alto": "San Mateo County",
    "Foster City": "San Mateo County",
    "Half Moon Bay": "San Mateo County",
    "Menlo Park": "San Mateo County",
    "Millbrae": "San Mateo County",
    "Pacifica": "San Mateo County",
    "Portola Valley": "San Mateo County",
    "Redwood City": "San Mateo County",
    "San Bruno": "San Mateo County",
    "San Carlos": "San Mateo County",
    "San Mateo": "San Mateo County",
    "South San Francisco": "San Mateo County",
    # Santa Clara County
    "Alviso": "Santa Clara County",
    "Campbell": "Santa Clara County",
    "Cupertino": "Santa Clara County",
    "Gilroy": "Santa Clara County",
    "Los Altos": "Santa Clara County",
    "Los Gatos": "Santa Clara County",
    "Milpitas": "Santa Clara County",
    "Morgan Hill": "Santa Clara County",
    "Mountain View": "Santa Clara County",
    "Palo Alto": "Santa Clara County",
    "San Jose": "Santa Clara County",
    "Santa Clara": "Santa Clara County",
    "Saratoga": "Santa Clara County",
    "Sunnyvale": "Santa Clara County",
    # Solano County
    "Benicia": "Solano County",
    "Dixon": "Solano County",
    "Fairfield": "Solano County",
    "Rio Vista": "Solano County",
    "Suisun City": "Solano County",
    "Vacaville": "Solano County",
    "Vallejo": "Solano County",
    # Sonoma County
    "Cloverdale": "Sonoma County",
    "Cotati": "Sonoma County",
    "Forestville": "Sonoma County",
    "Guerneville": "Sonoma County",
    "Healdsburg": "Sonoma County",
    "Petaluma": "Sonoma County",
    "Rohnert Park": "Sonoma County",
    "Santa Rosa": "Sonoma County",
    "Sebastopol": "Sonoma County",
    "Sonoma": "Sonoma County",
    "Windsor": "Sonoma County",
}

BAY_AREA_COUNTIES = (
    "Alameda County",
    "Contra Costa County",
    "Marin County",
    "Napa County",
    "San Francisco",
    "San Mateo County",
    "Santa Clara County",
    "Solano County",
    "Sonoma County",
)


@dataclass(frozen=True)
class Location:
    zip: Optional[str] = None
    city: Optional[str] = None
    county: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Only the keys that were resolved."""
        return {k: v for k, v in asdict(self).items() if v is not None}


def extract_location(query: str) -> Optional[Location]:
    """
    Extract geographic info from a query.

    Order, first match wins:
    1. a standalone 5-digit token found in ZIP_TO_CITY
    2. any known city name
    3. any Bay Area county name, with or without the " County" suffix

    Returns None when nothing matches.
    """
    if not query:
        return None

    zip_match = ZIP_PATTERN.search(query)
    if zip_match:
        zip_code = zip_match.group(1)
        city = ZIP_TO_CITY.get(zip_code)
        if city:
            return Location(zip=zip_code, city=city, county=CITY_TO_COUNTY[city])

    query_lower = query.lower()
    for city, county in CITY_TO_COUNTY.items():
        if city.lower() in query_lower:
            return Location(city=city, county=county)

    for county in BAY_AREA_COUNTIES:
        if county.lower() in query_lower or county.replace(" County", "").lower() in query_lower:
            return Location(county=county)

    return None
