"""Language tables for query interpretation.

Every table is keyed by language code and frozen on construction; callers
receive a ``Lexicon`` instance (``DEFAULT_LEXICON`` unless a test or a
deployment injects another) rather than importing module-level dictionaries.

Phrase conventions: matching is done on lower-cased text at word
boundaries; a trailing ``*`` turns a phrase into a prefix match so that
agglutinative forms ("komedileri", "dizisi") hit the same entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from discovery.models.discovery import ContentType, Mood

SUPPORTED_LANGUAGES = ("en", "tr", "de", "fr", "es")


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


@dataclass(frozen=True, slots=True)
class MoodProfile:
    """Recommendation bias applied when a mood is detected."""
    genres: tuple[int, ...] = ()
    min_rating: float = 0.0
    max_runtime: int | None = None
    year_start: int | None = None
    year_end: int | None = None


@dataclass(frozen=True, slots=True)
class LanguageMarkers:
    """Characters and words that hint at a query language."""
    characters: str = ""
    words: tuple[str, ...] = ()


@dataclass(frozen=True)
class Lexicon:
    genres: Mapping[str, Mapping[str, int]]
    tv_genre_equivalents: Mapping[int, int]
    providers: Mapping[str, int]
    countries: Mapping[str, Mapping[str, str]]
    spoken_languages: Mapping[str, Mapping[str, str]]
    quality: Mapping[str, tuple[tuple[str, float], ...]]
    top_rated_sort: Mapping[str, tuple[str, ...]]
    newest_sort: Mapping[str, tuple[str, ...]]
    recent: Mapping[str, tuple[str, ...]]
    classic: Mapping[str, tuple[str, ...]]
    short_runtime: Mapping[str, tuple[str, ...]]
    mini_series: Mapping[str, tuple[str, ...]]
    long_series: Mapping[str, tuple[str, ...]]
    kids: Mapping[str, tuple[str, ...]]
    themes: Mapping[str, Mapping[str, str]]
    moods: Mapping[str, Mapping[Mood, tuple[str, ...]]]
    mood_emoji: Mapping[str, Mood]
    mood_profiles: Mapping[Mood, MoodProfile]
    content_type_idioms: Mapping[str, Mapping[str, ContentType]]
    both_types: Mapping[str, tuple[str, ...]]
    tv_terms: Mapping[str, tuple[str, ...]]
    movie_terms: Mapping[str, tuple[str, ...]]
    request_terms: Mapping[str, tuple[str, ...]]
    trending: Mapping[str, tuple[str, ...]]
    off_topic: Mapping[str, tuple[str, ...]]
    new_topic: Mapping[str, tuple[str, ...]]
    refining: Mapping[str, tuple[str, ...]]
    filler_words: Mapping[str, tuple[str, ...]]
    person_info_patterns: Mapping[str, tuple[str, ...]]
    person_credit_patterns: Mapping[str, tuple[tuple[str, str], ...]]
    content_info_patterns: Mapping[str, tuple[str, ...]]
    availability_patterns: Mapping[str, tuple[str, ...]]
    scene_terms: Mapping[str, tuple[str, ...]]
    informational_terms: Mapping[str, tuple[str, ...]]
    uncertainty_markers: tuple[str, ...]
    language_markers: Mapping[str, LanguageMarkers]
    mood_rating_confidence: int = 50
    explicit_mood_confidence: int = 80
    implicit_mood_floor: int = 40
    _cache: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def build(cls, **tables: Any) -> "Lexicon":
        """Create a lexicon, freezing nested dictionaries and lists."""
        return cls(**{name: _freeze(value) for name, value in tables.items()})

    def with_overrides(self, **tables: Any) -> "Lexicon":
        """Return a copy with some tables replaced, e.g. to add a language."""
        return replace(self, _cache={}, **{name: _freeze(value) for name, value in tables.items()})

    def phrases(self, table: str) -> tuple[str, ...]:
        """Flatten a per-language phrase table across every language."""
        key = ("phrases", table)
        if key not in self._cache:
            collected: list[str] = []
            for values in getattr(self, table).values():
                collected.extend(values)
            self._cache[key] = tuple(dict.fromkeys(collected))
        return self._cache[key]

    def mapping(self, table: str) -> Mapping[str, Any]:
        """Merge a per-language ``phrase -> value`` table across every language."""
        key = ("mapping", table)
        if key not in self._cache:
            merged: dict[str, Any] = {}
            for values in getattr(self, table).values():
                merged.update(values)
            self._cache[key] = MappingProxyType(merged)
        return self._cache[key]

    def known_vocabulary(self) -> frozenset[str]:
        """Every single word the filter tables understand, used to reject false names and titles."""
        key = ("vocabulary",)
        if key not in self._cache:
            words: set[str] = set()
            sources: list[Any] = [
                self.mapping("genres").keys(),
                self.providers.keys(),
                self.mapping("countries").keys(),
                self.mapping("spoken_languages").keys(),
                self.mapping("themes").keys(),
                [phrase for phrase, _ in self.quality_pairs()],
            ]
            for table in (
                "tv_terms",
                "movie_terms",
                "both_types",
                "request_terms",
                "trending",
                "filler_words",
                "recent",
                "classic",
                "short_runtime",
                "mini_series",
                "long_series",
                "kids",
                "top_rated_sort",
                "newest_sort",
            ):
                sources.append(self.phrases(table))
            for per_language in self.moods.values():
                for phrases in per_language.values():
                    sources.append(phrases)
            for source in sources:
                for phrase in source:
                    words.update(phrase.rstrip("*").split())
            self._cache[key] = frozenset(words)
        return self._cache[key]

    def quality_pairs(self) -> tuple[tuple[str, float], ...]:
        """Quality phrases across languages, strictest floor first."""
        key = ("quality",)
        if key not in self._cache:
            pairs: list[tuple[str, float]] = []
            for values in self.quality.values():
                pairs.extend(values)
            self._cache[key] = tuple(sorted(pairs, key=lambda pair: pair[1], reverse=True))
        return self._cache[key]

    def is_known_word(self, word: str) -> bool:
        """True for a lower-cased token that any filter table recognizes, prefix entries included."""
        if word in self.known_vocabulary():
            return True
        key = ("prefixes",)
        if key not in self._cache:
            prefixes: set[str] = set()
            for source in (
                self.mapping("genres").keys(),
                self.mapping("themes").keys(),
                self.mapping("countries").keys(),
                self.phrases("tv_terms"),
                self.phrases("movie_terms"),
                self.phrases("request_terms"),
                self.phrases("trending"),
                self.phrases("recent"),
                self.phrases("classic"),
            ):
                for phrase in source:
                    if phrase.endswith("*"):
                        prefixes.add(phrase.rstrip("*").split()[-1])
            self._cache[key] = tuple(sorted(prefixes))
        return any(word.startswith(prefix) for prefix in self._cache[key])


DEFAULT_LEXICON = Lexicon.build(
    genres={
        "en": {
            "action": 28, "adventure": 12, "animation": 16, "animated": 16, "cartoon*": 16,
            "comedy": 35, "comedies": 35, "romantic": 10749, "funny": 35, "crime": 80, "documentary": 99,
            "documentaries": 99, "drama": 18, "dramas": 18, "family": 10751, "fantasy": 14,
            "history": 36, "historical": 36, "horror": 27, "scary": 27, "musical*": 10402,
            "mystery": 9648, "mysteries": 9648, "romance": 10749, "rom-com": 10749,
            "sci-fi": 878, "scifi": 878, "science fiction": 878, "thriller*": 53,
            "war": 10752, "western*": 37,
        },
        "tr": {
            "aksiyon*": 28, "macera*": 12, "animasyon*": 16, "çizgi film*": 16, "komedi*": 35,
            "suç": 80, "polisiye": 80, "belgesel*": 99, "dram": 18, "dramı": 18, "dramlar*": 18,
            "aile": 10751, "fantastik": 14, "tarihi": 36, "korku*": 27, "müzikal*": 10402,
            "gizem*": 9648, "romantik": 10749, "bilim kurgu*": 878, "gerilim*": 53,
            "savaş*": 10752, "kovboy*": 37,
        },
        "de": {
            "abenteuer*": 12, "zeichentrick*": 16, "komödie*": 35, "krimi*": 80,
            "dokumentation*": 99, "doku": 99, "familienfilm*": 10751, "liebesfilm*": 10749,
            "science-fiction": 878, "kriegsfilm*": 10752, "actionfilm*": 28, "horrorfilm*": 27,
        },
        "fr": {
            "aventure*": 12, "comédie*": 35, "policier*": 80, "documentaire*": 99, "drame*": 18,
            "familial*": 10751, "fantastique": 14, "horreur": 27, "épouvante": 27,
            "mystère": 9648, "romantique": 10749, "guerre": 10752,
        },
        "es": {
            "acción": 28, "aventura*": 12, "animación": 16, "comedia*": 35, "crimen": 80,
            "documental*": 99, "familiar*": 10751, "fantasía": 14, "terror": 27,
            "misterio": 9648, "romántica*": 10749, "ciencia ficción": 878, "suspenso": 53,
            "guerra": 10752,
        },
    },
    # TV discovery uses merged genre ids for these categories.
    tv_genre_equivalents={28: 10759, 12: 10759, 878: 10765, 14: 10765, 10752: 10768},
    providers={
        "netflix": 8, "amazon prime": 9, "prime video": 9, "amazon": 9, "disney+": 337,
        "disney plus": 337, "disney": 337, "hbo max": 1899, "hbo": 1899, "hulu": 15,
        "apple tv+": 350, "apple tv plus": 350, "apple tv": 350, "paramount+": 531,
        "paramount plus": 531, "paramount": 531, "mubi": 11, "crunchyroll": 283,
    },
    countries={
        "en": {
            "american": "US", "hollywood": "US", "british": "GB", "french": "FR", "japanese": "JP",
            "anime": "JP", "korean": "KR", "k-drama*": "KR", "turkish": "TR", "spanish": "ES",
            "german": "DE", "italian": "IT", "indian": "IN", "bollywood": "IN", "mexican": "MX",
        },
        "tr": {
            "türk": "TR", "yerli": "TR", "amerikan": "US", "ingiliz": "GB", "fransız": "FR",
            "japon": "JP", "kore": "KR", "ispanyol": "ES", "alman": "DE", "italyan": "IT",
        },
        "de": {"deutsche*": "DE", "amerikanische*": "US", "französische*": "FR", "türkische*": "TR"},
        "fr": {"américain*": "US", "japonais*": "JP", "coréen*": "KR", "allemand*": "DE"},
        "es": {"española*": "ES", "estadounidense*": "US", "coreana*": "KR", "mexicana*": "MX"},
    },
    spoken_languages={
        "en": {
            "in english": "en", "in spanish": "es", "in french": "fr", "in korean": "ko",
            "in japanese": "ja", "in turkish": "tr", "in german": "de", "spanish-language": "es",
        },
        "tr": {"ingilizce": "en", "türkçe": "tr", "ispanyolca": "es", "korece": "ko", "japonca": "ja"},
        "de": {"auf deutsch": "de", "auf englisch": "en"},
        "fr": {"en français": "fr", "en anglais": "en"},
        "es": {"en español": "es", "en inglés": "en"},
    },
    # Ordered strictest first; the first hit wins.
    quality={
        "en": [
            ("masterpiece*", 8.0), ("excellent", 8.0), ("highest rated", 7.5), ("top rated", 7.5),
            ("top-rated", 7.5), ("best", 7.5), ("high rated", 7.0), ("highly rated", 7.0),
            ("well-rated", 6.5), ("well rated", 6.5), ("quality", 6.5),
        ],
        "tr": [
            ("mükemmel", 8.0), ("şaheser", 8.0), ("başyapıt", 8.0), ("en iyi", 7.5),
            ("çok iyi puanlı", 7.5), ("yüksek puanlı", 7.0), ("iyi puanlı", 7.0), ("kaliteli", 6.5),
        ],
        "de": [("meisterwerk*", 8.0), ("die besten", 7.5), ("beste*", 7.5), ("hoch bewertet*", 7.0)],
        "fr": [("chef-d'œuvre", 8.0), ("meilleurs", 7.5), ("meilleures", 7.5), ("bien notés", 7.0)],
        "es": [("obra maestra", 8.0), ("mejores", 7.5), ("mejor valoradas", 7.5), ("bien valoradas", 7.0)],
    },
    top_rated_sort={"en": ["highest rated"], "tr": ["en yüksek puanlı"], "de": [], "fr": [], "es": []},
    newest_sort={
        "en": ["newest", "latest"], "tr": ["en yeni", "son çıkan*"], "de": ["neueste*"],
        "fr": ["derniers", "dernières"], "es": ["más recientes", "últimos", "últimas"],
    },
    recent={
        "en": ["new movie*", "new film*", "new show*", "new series", "new releases", "recent*"],
        "tr": ["yeni film*", "yeni dizi*", "yeni çıkan*", "güncel"],
        "de": ["neue filme", "neue serien"],
        "fr": ["nouveaux films", "nouvelles séries", "récent*"],
        "es": ["nuevas películas", "nuevas series", "recientes"],
    },
    classic={
        "en": ["classic*", "old movie*", "old film*", "old show*"],
        "tr": ["klasik*", "eski film*", "eski dizi*"],
        "de": ["klassiker*"], "fr": ["classique*"], "es": ["clásic*"],
    },
    short_runtime={"en": ["short"], "tr": ["kısa"], "de": ["kurze*"], "fr": ["court*"], "es": ["corta*"]},
    mini_series={
        "en": ["mini series", "miniseries", "mini-series", "one season", "limited series"],
        "tr": ["mini dizi*", "tek sezon*"], "de": ["miniserie*"], "fr": ["mini-série*"], "es": ["miniserie*"],
    },
    long_series={"en": ["long series", "long-running"], "tr": ["uzun dizi*"], "de": [], "fr": [], "es": []},
    kids={
        "en": ["for kids", "kids", "children", "family-friendly"], "tr": ["çocuk*"], "de": ["kinder*"],
        "fr": ["enfants"], "es": ["niños"],
    },
    themes={
        "en": {
            "time travel": "time travel", "zombie*": "zombie", "heist": "heist", "vampire*": "vampire",
            "superhero*": "superhero", "space": "space", "serial killer*": "serial killer",
            "dinosaur*": "dinosaur", "robot*": "robot", "true story": "based on true story",
            "based on a true story": "based on true story", "post-apocalyptic": "post-apocalyptic",
            "high school": "high school", "alien*": "alien",
        },
        "tr": {
            "zaman yolculuğu": "time travel", "zombi*": "zombie", "soygun*": "heist",
            "vampir*": "vampire", "süper kahraman*": "superhero", "uzay*": "space",
            "seri katil*": "serial killer", "gerçek hikaye*": "based on true story", "uzaylı*": "alien",
        },
        "de": {"zeitreise*": "time travel", "weltraum*": "space", "wahre geschichte": "based on true story"},
        "fr": {"voyage dans le temps": "time travel", "histoire vraie": "based on true story"},
        "es": {"viajes en el tiempo": "time travel", "historia real": "based on true story"},
    },
    moods={
        "en": {
            Mood.SAD: ["sad", "feeling down", "depressed", "upset", "heartbroken", "lonely", "unhappy", "miserable"],
            Mood.HAPPY: ["happy", "feeling good", "in a good mood", "cheerful", "joyful"],
            Mood.BORED: ["bored", "nothing to do", "boring day"],
            Mood.EXCITED: ["excited", "pumped", "hyped", "thrilled"],
            Mood.TIRED: ["tired", "exhausted", "sleepy", "worn out", "long day", "drained"],
            Mood.RELAXED: ["relax", "relaxed", "relaxing", "chill", "unwind", "cozy"],
            Mood.STRESSED: ["stressed", "anxious", "overwhelmed", "under pressure", "nervous"],
            Mood.ROMANTIC: ["in love", "date night", "feeling romantic", "romantic mood", "romantic evening"],
            Mood.NOSTALGIC: ["nostalgic", "nostalgia", "miss the old days", "reminiscing", "throwback"],
            Mood.ANGRY: ["angry", "furious", "pissed off", "annoyed", "frustrated"],
        },
        "tr": {
            Mood.SAD: ["üzgünüm", "üzgün", "mutsuzum", "mutsuz", "moralim bozuk", "canım sıkkın",
                       "kötü hissediyorum", "yalnızım", "ağlamak istiyorum"],
            Mood.HAPPY: ["mutluyum", "keyfim yerinde", "neşeliyim", "harika hissediyorum"],
            Mood.BORED: ["sıkılıyorum", "sıkıldım", "canım sıkılıyor", "yapacak bir şey yok"],
            Mood.EXCITED: ["heyecanlıyım", "coştum", "enerjiğim yüksek"],
            Mood.TIRED: ["yorgunum", "bitkinim", "uykum var", "yoruldum"],
            Mood.RELAXED: ["rahatlamak", "dinlenmek", "kafa dinlemek", "sakin bir"],
            Mood.STRESSED: ["stresliyim", "stresli", "gerginim", "bunaldım", "endişeliyim"],
            Mood.ROMANTIC: ["aşığım", "sevgilimle", "romantik hissediyorum"],
            Mood.NOSTALGIC: ["nostalji*", "eski günleri", "çocukluğum*"],
            Mood.ANGRY: ["sinirliyim", "kızgınım", "öfkeliyim", "çok kızdım"],
        },
        "de": {
            Mood.SAD: ["traurig", "deprimiert", "niedergeschlagen"],
            Mood.HAPPY: ["glücklich", "fröhlich", "gut gelaunt"],
            Mood.BORED: ["gelangweilt", "mir ist langweilig", "langweile mich"],
            Mood.EXCITED: ["aufgeregt", "begeistert"],
            Mood.TIRED: ["müde", "erschöpft"],
            Mood.RELAXED: ["entspannen", "entspannt", "chillen"],
            Mood.STRESSED: ["gestresst"],
            Mood.ROMANTIC: ["verliebt"],
            Mood.NOSTALGIC: ["nostalgisch"],
            Mood.ANGRY: ["wütend", "verärgert"],
        },
        "fr": {
            Mood.SAD: ["triste", "déprimé", "déprimée"],
            Mood.HAPPY: ["heureux", "heureuse", "joyeux"],
            Mood.BORED: ["je m'ennuie", "ennuyé", "ennuyée"],
            Mood.EXCITED: ["excité", "excitée", "enthousiaste"],
            Mood.TIRED: ["fatigué", "fatiguée", "épuisé", "épuisée"],
            Mood.RELAXED: ["me détendre", "détendu", "détendue"],
            Mood.STRESSED: ["stressé", "stressée", "angoissé"],
            Mood.ROMANTIC: ["amoureux", "amoureuse"],
            Mood.NOSTALGIC: ["nostalgique"],
            Mood.ANGRY: ["en colère", "fâché", "énervé"],
        },
        "es": {
            Mood.SAD: ["triste", "deprimido", "deprimida"],
            Mood.HAPPY: ["feliz", "contento", "contenta", "alegre"],
            Mood.BORED: ["aburrido", "aburrida", "me aburro"],
            Mood.EXCITED: ["emocionado", "emocionada"],
            Mood.TIRED: ["cansado", "cansada", "agotado", "agotada"],
            Mood.RELAXED: ["relajarme", "relajado", "relajada", "tranquilo"],
            Mood.STRESSED: ["estresado", "estresada", "agobiado"],
            Mood.ROMANTIC: ["enamorado", "enamorada"],
            Mood.NOSTALGIC: ["nostálgico", "nostálgica"],
            Mood.ANGRY: ["enojado", "enfadado", "furioso"],
        },
    },
    mood_emoji={
        "😢": Mood.SAD, "😔": Mood.SAD, "😞": Mood.SAD, "😭": Mood.SAD,
        "😊": Mood.HAPPY, "😄": Mood.HAPPY, "😁": Mood.HAPPY, "🥳": Mood.HAPPY,
        "😴": Mood.TIRED, "😩": Mood.TIRED, "🥱": Mood.TIRED,
        "😡": Mood.ANGRY, "🤬": Mood.ANGRY, "😠": Mood.ANGRY,
        "🥰": Mood.ROMANTIC, "😍": Mood.ROMANTIC,
        "🤩": Mood.EXCITED,
    },
    mood_profiles={
        Mood.SAD: MoodProfile(genres=(35, 18), min_rating=7.0),
        Mood.HAPPY: MoodProfile(genres=(35, 10749, 12)),
        Mood.BORED: MoodProfile(genres=(28, 53), min_rating=6.5),
        Mood.EXCITED: MoodProfile(genres=(28, 12, 878)),
        Mood.TIRED: MoodProfile(genres=(35, 16), max_runtime=100),
        Mood.RELAXED: MoodProfile(genres=(99, 18, 10749)),
        Mood.STRESSED: MoodProfile(genres=(35,)),
        Mood.ROMANTIC: MoodProfile(genres=(10749, 18)),
        Mood.NOSTALGIC: MoodProfile(year_start=1980, year_end=2000),
        Mood.ANGRY: MoodProfile(genres=(28, 53)),
    },
    # "dizi film" reads as "series" in Turkish, never as "series and film".
    content_type_idioms={
        "tr": {"dizi film*": ContentType.TV},
    },
    both_types={
        "en": [
            "movies and shows", "movies and series", "shows and movies", "series and movies",
            "movie or show", "movies or shows", "films and series", "series and movie", "show and movie",
        ],
        "tr": ["dizi ve film*", "dizi, film*", "film dizi*", "film ve dizi*", "dizi veya film*", "film veya dizi*"],
        "de": ["serie und film", "serien und filme", "filme und serien"],
        "fr": ["série et film", "séries et films", "films et séries"],
        "es": ["serie y película", "series y películas", "películas y series"],
    },
    tv_terms={
        "en": ["tv series", "tv show*", "series", "a show", "the show", "shows", "sitcom*", "miniseries", "k-drama*"],
        "tr": ["dizi*"],
        "de": ["fernsehserie*", "serie", "serien"],
        "fr": ["série*", "feuilleton*"],
        "es": ["serie de televisión", "serie", "series"],
    },
    movie_terms={
        "en": ["movie*", "film", "films", "flick*"],
        "tr": ["film*", "sinema*"],
        "de": ["film", "filme", "kino*"],
        "fr": ["film", "films", "cinéma"],
        "es": ["película*", "peli", "pelis", "cine"],
    },
    request_terms={
        "en": ["watch", "recommend", "suggest", "something", "anything", "streaming", "stream"],
        "tr": ["izle*", "öner*", "tavsiye*", "bul"],
        "de": ["schauen", "empfehl*", "vorschlag*"],
        "fr": ["regarder", "recommand*", "conseill*"],
        "es": ["ver", "recomienda*", "recomendar*"],
    },
    trending={
        "en": ["trending", "trend", "popular", "hot right now", "viral", "what's hot", "everyone is watching"],
        "tr": ["trend*", "popüler", "öne çıkan*", "gündem*", "viral"],
        "de": ["beliebt*", "angesagt*"],
        "fr": ["tendance*", "populaire*"],
        "es": ["tendencia*", "populares"],
    },
    off_topic={
        "en": [
            "weather", "recipe*", "cook", "cooking", "stock price*", "bitcoin", "homework", "math",
            "equation*", "politic*", "president", "election*", "translate", "write code", "python code",
            "football score*", "horoscope",
        ],
        "tr": ["hava durumu", "yemek tarifi", "tarif*", "borsa", "dolar kuru", "ödev*", "matematik", "siyaset*",
               "seçim*", "maç skoru", "burç*"],
        "de": ["wetter", "rezept*", "aktienkurs*", "hausaufgabe*", "politik"],
        "fr": ["météo", "recette*", "devoirs", "politique"],
        "es": ["clima", "receta*", "tarea*", "política"],
    },
    new_topic={
        "en": ["now", "instead", "switch", "change", "different"],
        "tr": ["şimdi", "bunun yerine", "başka"],
        "de": ["stattdessen", "jetzt"],
        "fr": ["plutôt", "maintenant"],
        "es": ["en cambio", "ahora"],
    },
    refining={
        "en": ["but", "except", "with", "also", "and", "plus"],
        "tr": ["ama", "ve", "ayrıca", "ile"],
        "de": ["aber", "und", "auch"],
        "fr": ["mais", "et", "aussi"],
        "es": ["pero", "y", "también"],
    },
    filler_words={
        "en": [
            "a", "an", "the", "some", "any", "good", "great", "nice", "me", "i", "you", "for", "to",
            "there", "is", "are", "in", "on", "of", "like", "please", "more", "other", "similar",
            "all", "give", "find", "fun", "cool", "awesome", "interesting", "tonight", "today",
            "weekend", "want", "need", "let's", "lets", "what", "which", "who", "how", "where", "when",
            "can", "could", "should", "do", "does", "did", "about", "that", "this", "my", "your",
            "i'm", "im", "show", "tell", "watch", "see", "tonight's", "it", "be", "with", "by",
        ],
        "tr": ["bir", "bana", "güzel", "iyi", "hoş", "keyifli", "biraz", "için", "olan", "gibi", "var", "mı",
               "ne", "hangi", "bu", "şu", "akşam", "bugün", "bence", "lütfen", "benzer", "başka", "bazı"],
        "de": ["ein", "eine", "einen", "gute", "guten", "mir", "für", "heute", "bitte"],
        "fr": ["un", "une", "des", "bon", "bons", "moi", "pour", "ce", "soir"],
        "es": ["una", "unas", "unos", "buena", "buenas", "buenos", "para", "algo", "esta", "noche"],
    },
    # Person and title patterns run against lower-cased text; ``name``/``title``
    # spans are mapped back onto the original text to keep capitalization.
    person_info_patterns={
        "en": [
            r"^(?:who is|who's|who was) (?P<name>.+?)\??$",
            r"^how old is (?P<name>.+?)\??$",
            r"^(?:when|where) was (?P<name>.+?) born\??$",
            r"^(?P<name>.+?)'s (?:birthday|age|biography|bio)\??$",
        ],
        "tr": [
            r"^(?P<name>.+?) kim(?:dir)?\??$",
            r"^(?P<name>.+?) kaç yaşında\??$",
            r"^(?P<name>.+?) nereli\??$",
            r"^(?P<name>.+?) doğum tarihi\b.*$",
            r"^(?P<name>.+?) hakkında bilgi\b.*$",
        ],
        "de": [r"^wer ist (?P<name>.+?)\??$", r"^wie alt ist (?P<name>.+?)\??$"],
        "fr": [r"^qui est (?P<name>.+?)\??$", r"^quel âge a (?P<name>.+?)\??$"],
        "es": [r"^(?:quién|quien) es (?P<name>.+?)\??$", r"^cuántos años tiene (?P<name>.+?)\??$"],
    },
    person_credit_patterns={
        "en": [
            ("director", r"\b(?:directed by|by director|from director) (?P<name>.+)$"),
            ("actor", r"\b(?:movies|films|shows|series|something) (?:with|starring|featuring) (?P<name>.+)$"),
            ("actor", r"^(?:starring|featuring) (?P<name>.+)$"),
            ("any", r"^(?P<name>.+?)(?:'s)? (?:movies|films|tv series|tv shows|shows|series|filmography)\b"),
        ],
        "tr": [
            ("actor", r"^(?P<name>.+?) (?:oynadığı|oynadigi|rol aldığı|başrolde olduğu)\b"),
            ("director", r"^(?P<name>.+?) (?:yönettiği|yönetmenliğini yaptığı)\b"),
            ("any", r"^(?P<name>.+?) (?:dizi film|filmleri|dizileri|filmlerini|dizilerini|filmler|diziler)\b"),
        ],
        "de": [
            ("actor", r"\b(?:filme|serien|film|serie) mit (?P<name>.+)$"),
            ("director", r"\b(?:regie von|von regisseur) (?P<name>.+)$"),
        ],
        "fr": [
            ("actor", r"\b(?:films?|séries?) avec (?P<name>.+)$"),
            ("director", r"\bréalisés? par (?P<name>.+)$"),
        ],
        "es": [
            ("actor", r"\b(?:películas?|series?) (?:con|de) (?P<name>.+)$"),
            ("director", r"\bdirigidas? por (?P<name>.+)$"),
        ],
    },
    content_info_patterns={
        "en": [
            r"^when (?:did|was) (?P<title>.+?) (?:come out|released|release|air|premiere)\??$",
            r"^what(?:'s| is) (?P<title>.+?) about\??$",
            r"^who directed (?P<title>.+?)\??$",
            r"^who (?:is|was|are|plays) in (?P<title>.+?)\??$",
            r"^(?:cast|plot|story|director) of (?P<title>.+?)\??$",
            r"^how many seasons (?:does|has) (?P<title>.+?)(?: have| got)?\??$",
        ],
        "tr": [
            r"^(?P<title>.+?) ne zaman (?:çıktı|yayınlandı|vizyona girdi)\??$",
            r"^(?P<title>.+?) (?:konusu|konusu ne|ne anlatıyor)\??$",
            r"^(?P<title>.+?) (?:yönetmeni kim|yönetmeni)\??$",
            r"^(?P<title>.+?) (?:oyuncuları|oyuncu kadrosu)\??$",
            r"^(?P<title>.+?) kaç sezon\b.*$",
            r"^(?P<title>.+?) hakkında\??$",
        ],
        "de": [
            r"^wann kam (?P<title>.+?) (?:raus|heraus)\??$",
            r"^worum geht es (?:in|bei) (?P<title>.+?)\??$",
            r"^wer führte regie bei (?P<title>.+?)\??$",
        ],
        "fr": [
            r"^de quoi parle (?P<title>.+?)\??$",
            r"^quand est sortie? (?P<title>.+?)\??$",
            r"^qui a réalisé (?P<title>.+?)\??$",
        ],
        "es": [
            r"^de qué trata (?P<title>.+?)\??$",
            r"^cuándo (?:salió|se estrenó) (?P<title>.+?)\??$",
            r"^quién dirigió (?P<title>.+?)\??$",
        ],
    },
    availability_patterns={
        "en": [
            r"^is (?P<title>.+?) (?:available|streaming)\b.*$",
            r"^is (?P<title>.+?) on (?:netflix|hulu|disney\+?|disney plus|hbo(?: max)?|amazon(?: prime)?|prime video|apple tv\+?|paramount\+?)\??$",
            r"^where (?:can i|to|do i|could i|should i) (?:watch|stream|see) (?P<title>.+?)\??$",
            r"^is there (?P<title>.+?) on .+$",
        ],
        "tr": [
            r"^(?P<title>.+?) var mı\??$",
            r"^(?P<title>.+?) (?:hangi platformda|nerede izlenir|nereden izlenir|nerede izleyebilirim)\??$",
        ],
        "de": [r"^wo kann ich (?P<title>.+?) (?:sehen|schauen|streamen)\??$", r"^(?:gibt es|läuft) (?P<title>.+?) auf .+$"],
        "fr": [r"^où (?:regarder|voir|puis-je regarder) (?P<title>.+?)\??$"],
        "es": [r"^dónde (?:ver|puedo ver) (?P<title>.+?)\??$"],
    },
    scene_terms={
        "en": ["says", "said", "yells", "screams", "sings", "quote", "scene where", "scene with", "movie where",
               "film where", "show where", "the one where", "character who", "wearing", "wears", "dressed",
               "dancing", "running", "crying", "fighting", "driving"],
        "tr": ["diyor", "dedi", "dediği", "diye bağır*", "diye söyle*", "giyen", "giydiği", "giymiş", "sahne*",
               "dans eden", "dans ettiği", "koşan", "koştuğu", "ağlayan", "ağladığı", "şarkı söyleyen",
               "replik*", "hani bir film"],
    },
    informational_terms={
        "en": ["about", "when", "who", "how many", "how old", "plot", "story", "where", "what year"],
        "tr": ["hakkında", "ne zaman", "kim", "kaç", "konusu", "hikaye*", "nerede"],
    },
    uncertainty_markers=[
        "uncertain", "don't have", "don't know", "not sure", "i'm not certain", "cannot confirm",
        "bilmiyorum", "emin değilim", "bilgim yok",
    ],
    language_markers={
        "tr": LanguageMarkers(
            characters="ğüşıöçĞÜŞİÖÇ",
            words=("film", "dizi", "için", "olan", "var", "ne", "hangi", "gibi", "diye", "deki", "ile", "öner", "mı"),
        ),
        "de": LanguageMarkers(characters="äöüßÄÖÜ", words=("serie", "mit", "der", "die", "das", "und", "ich", "filme")),
        "fr": LanguageMarkers(
            characters="àâäéèêëïîôùûüÿœæç",
            words=("avec", "pour", "où", "série", "les", "des", "une", "je"),
        ),
        "es": LanguageMarkers(
            characters="áéíóúñü¿¡",
            words=("película", "películas", "serie", "con", "donde", "para", "una", "quiero"),
        ),
        "en": LanguageMarkers(
            words=("the", "movie", "movies", "show", "shows", "with", "recommend", "watch", "what", "is", "me", "i'm"),
        ),
    },
)
