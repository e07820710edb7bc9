"""Localized reply strings used without a completion call.

Tables are keyed by language code and frozen like the lexicon; a
deployment can pass its own ``Messages`` to the composer.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Mapping

from discovery.models.discovery import ContentType, Mood

DEFAULT_LANGUAGE = "en"

# Locale language codes that share a table with another code.
LANGUAGE_ALIASES = MappingProxyType({"nb": "no", "nn": "no"})


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value


@dataclass(frozen=True)
class Messages:
    no_results: Mapping[str, str]
    off_topic: Mapping[str, str]
    mood_acknowledgments: Mapping[Mood, Mapping[str, str]]
    found_count: Mapping[str, str]
    found_title: Mapping[str, str]
    content_nouns: Mapping[str, Mapping[ContentType, str]]

    @classmethod
    def build(cls, **tables: Any) -> "Messages":
        return cls(**{name: _freeze(value) for name, value in tables.items()})

    def with_overrides(self, **tables: Any) -> "Messages":
        return replace(self, **{name: _freeze(value) for name, value in tables.items()})

    def no_results_message(self, language: str) -> str:
        return _pick(self.no_results, language)

    def off_topic_message(self, language: str) -> str:
        return _pick(self.off_topic, language)

    def mood_acknowledgment(self, mood: Mood, language: str) -> str | None:
        per_language = self.mood_acknowledgments.get(mood)
        if not per_language:
            return None
        return _pick(per_language, language)

    def found_count_message(self, count: int, content_type: ContentType, language: str) -> str:
        """Safe reply that states nothing beyond the result count."""
        nouns = _pick(self.content_nouns, language)
        return _pick(self.found_count, language).format(count=count, noun=nouns[content_type])

    def found_title_message(self, title: str, language: str) -> str:
        return _pick(self.found_title, language).format(title=title)


def _pick(table: Mapping[str, Any], language: str) -> Any:
    code = (language or DEFAULT_LANGUAGE).lower().split("-")[0]
    code = LANGUAGE_ALIASES.get(code, code)
    if code in table:
        return table[code]
    return table[DEFAULT_LANGUAGE]


DEFAULT_MESSAGES = Messages.build(
    no_results={
        "en": "Sorry, I couldn't find results for that search. Please try something different - for example, just mention a genre or platform and I can give you great recommendations!",
        "tr": "Üzgünüm, bu arama için sonuç bulamadım. Lütfen farklı bir şey deneyin - örneğin sadece bir tür veya platform söylerseniz size harika öneriler sunabilirim!",
        "de": "Es tut mir leid, ich konnte keine Ergebnisse für diese Suche finden. Bitte versuchen Sie etwas anderes - zum Beispiel, nennen Sie einfach ein Genre oder eine Plattform und ich kann Ihnen tolle Empfehlungen geben!",
        "fr": "Désolé, je n'ai pas trouvé de résultats pour cette recherche. Veuillez essayer quelque chose de différent - par exemple, mentionnez simplement un genre ou une plateforme et je peux vous donner d'excellentes recommandations!",
        "es": "Lo siento, no pude encontrar resultados para esa búsqueda. Por favor, intenta algo diferente - por ejemplo, solo menciona un género o plataforma y puedo darte excelentes recomendaciones!",
        "it": "Mi dispiace, non ho trovato risultati per questa ricerca. Prova qualcosa di diverso - ad esempio, menziona semplicemente un genere o una piattaforma e posso darti ottimi consigli!",
        "pt": "Desculpe, não encontrei resultados para essa pesquisa. Por favor, tente algo diferente - por exemplo, mencione apenas um gênero ou plataforma e posso dar ótimas recomendações!",
        "nl": "Sorry, ik kon geen resultaten vinden voor die zoekopdracht. Probeer iets anders - bijvoorbeeld, noem gewoon een genre of platform en ik kan je geweldige aanbevelingen geven!",
        "pl": "Przepraszam, nie znalazłem wyników dla tego wyszukiwania. Spróbuj czegoś innego - na przykład, po prostu wymień gatunek lub platformę, a mogę podać świetne rekomendacje!",
        "sv": "Förlåt, jag kunde inte hitta resultat för den sökningen. Försök något annat - till exempel, nämn bara en genre eller plattform så kan jag ge dig fantastiska rekommendationer!",
        "da": "Undskyld, jeg kunne ikke finde resultater for den søgning. Prøv noget andet - for eksempel, nævn bare en genre eller platform, og jeg kan give dig fantastiske anbefalinger!",
        "fi": "Anteeksi, en löytänyt tuloksia tälle haulle. Kokeile jotain muuta - esimerkiksi mainitse vain genre tai alusta, niin voin antaa sinulle loistavia suosituksia!",
        "no": "Beklager, jeg fant ingen resultater for det søket. Prøv noe annet - for eksempel, nevn bare en sjanger eller plattform, så kan jeg gi deg flotte anbefalinger!",
        "ru": "Извините, я не смог найти результаты для этого поиска. Попробуйте что-то другое - например, просто укажите жанр или платформу, и я смогу дать вам отличные рекомендации!",
        "ja": "申し訳ございません、その検索結果が見つかりませんでした。別のものを試してください - たとえば、ジャンルやプラットフォームを挙げていただければ、素晴らしいおすすめをご提供できます！",
        "ko": "죄송합니다. 해당 검색에 대한 결과를 찾을 수 없습니다. 다른 것을 시도해보세요 - 예를 들어 장르나 플랫폼만 언급하면 훌륭한 추천을 해드릴 수 있습니다!",
        "zh": "抱歉，我找不到该搜索的结果。请尝试其他内容 - 例如，只需提及类型或平台，我就可以为您提供很棒的推荐！",
    },
    off_topic={
        "en": "I can only help you find movies and TV shows. I don't have information about other topics.",
        "tr": "Ben sadece film ve dizi önerileri konusunda yardımcı olabilirim. Diğer konular hakkında bilgim yok.",
        "de": "Ich kann nur bei Film- und Serienempfehlungen helfen. Ich habe keine Informationen zu anderen Themen.",
        "fr": "Je ne peux vous aider qu'avec des recommandations de films et séries. Je n'ai pas d'informations sur d'autres sujets.",
        "es": "Solo puedo ayudar con recomendaciones de películas y series. No tengo información sobre otros temas.",
        "it": "Posso aiutarti solo con raccomandazioni di film e serie TV. Non ho informazioni su altri argomenti.",
        "pt": "Só posso ajudar com recomendações de filmes e séries. Não tenho informações sobre outros assuntos.",
        "nl": "Ik kan alleen helpen met film- en serieaanbevelingen. Ik heb geen informatie over andere onderwerpen.",
        "pl": "Mogę pomóc tylko z rekomendacjami filmów i seriali. Nie mam informacji na inne tematy.",
        "sv": "Jag kan bara hjälpa till med film- och serierekommendationer. Jag har ingen information om andra ämnen.",
        "da": "Jeg kan kun hjælpe med film- og serieanbefalinger. Jeg har ingen information om andre emner.",
        "fi": "Voin auttaa vain elokuva- ja sarjasuosituksissa. Minulla ei ole tietoa muista aiheista.",
        "no": "Jeg kan bare hjelpe med film- og serieanbefalinger. Jeg har ingen informasjon om andre emner.",
        "ru": "Я могу помочь только с рекомендациями фильмов и сериалов. У меня нет информации о других темах.",
        "ja": "映画やテレビ番組のおすすめについてのみお手伝いできます。他のトピックに関する情報は持っていません。",
        "ko": "영화 및 TV 프로그램 추천에 대해서만 도움을 드릴 수 있습니다. 다른 주제에 대한 정보는 없습니다.",
        "zh": "我只能帮助推荐电影和电视节目。我没有关于其他主题的信息。",
    },
    mood_acknowledgments={
        Mood.SAD: {
            "en": "I noticed you're feeling down. I've found uplifting content to cheer you up!",
            "tr": "Üzüldüğünüzü fark ettim. Sizi neşelendirecek içerikler buldum!",
            "de": "Ich habe bemerkt, dass Sie sich niedergeschlagen fühlen. Ich habe aufmunternde Inhalte gefunden!",
            "fr": "J'ai remarqué que vous vous sentez triste. J'ai trouvé du contenu réconfortant!",
            "es": "Noté que te sientes triste. ¡He encontrado contenido animador!",
        },
        Mood.HAPPY: {
            "en": "Great to see you're in a good mood! Here's some feel-good content to keep the vibe going!",
            "tr": "Keyfinizin yerinde olduğunu görmek harika! Ruh halinizi koruyacak içerikler buldum!",
            "de": "Schön zu sehen, dass Sie gute Laune haben! Hier ist fröhlicher Inhalt!",
            "fr": "Ravi de voir que vous êtes de bonne humeur! Voici du contenu joyeux!",
            "es": "¡Genial verte de buen humor! ¡Aquí hay contenido alegre!",
        },
        Mood.BORED: {
            "en": "Feeling bored? I've got exciting, high-energy content to grab your attention!",
            "tr": "Sıkılıyor musun? Dikkatini çekecek heyecanlı içerikler buldum!",
            "de": "Gelangweilt? Ich habe spannende, energiegeladene Inhalte gefunden!",
            "fr": "Vous vous ennuyez? J'ai trouvé du contenu passionnant et énergique!",
            "es": "¿Aburrido? ¡Tengo contenido emocionante y energético!",
        },
        Mood.EXCITED: {
            "en": "Love the energy! I've found thrilling content that matches your excitement!",
            "tr": "Bu enerji harika! Heyecanınıza uygun adrenalin dolu içerikler buldum!",
            "de": "Tolle Energie! Ich habe aufregende Inhalte gefunden!",
            "fr": "J'adore l'énergie! J'ai trouvé du contenu palpitant!",
            "es": "¡Me encanta la energía! ¡He encontrado contenido emocionante!",
        },
        Mood.TIRED: {
            "en": "I can tell you're tired. Here's some easy-to-watch, relaxing content!",
            "tr": "Yorgun olduğunuzu anlayabiliyorum. İzlemesi kolay, rahatlatıcı içerikler buldum!",
            "de": "Ich merke, dass Sie müde sind. Hier ist leicht zu schauender, entspannender Inhalt!",
            "fr": "Je vois que vous êtes fatigué. Voici du contenu facile à regarder et relaxant!",
            "es": "Veo que estás cansado. ¡Aquí hay contenido fácil de ver y relajante!",
        },
        Mood.RELAXED: {
            "en": "Perfect time to unwind! I've found calm, soothing content for you!",
            "tr": "Rahatlamak için mükemmel zaman! Sakin, huzurlu içerikler buldum!",
            "de": "Perfekte Zeit zum Entspannen! Ich habe ruhige, beruhigende Inhalte gefunden!",
            "fr": "Parfait pour se détendre! J'ai trouvé du contenu calme et apaisant!",
            "es": "¡Momento perfecto para relajarse! ¡He encontrado contenido tranquilo!",
        },
        Mood.STRESSED: {
            "en": "I sense you need a break. Here's stress-free content to help you relax!",
            "tr": "Bir molaya ihtiyacınız olduğunu hissediyorum. Rahatlamanız için stressiz içerikler buldum!",
            "de": "Ich spüre, dass Sie eine Pause brauchen. Hier ist stressfreier Inhalt!",
            "fr": "Je sens que vous avez besoin d'une pause. Voici du contenu sans stress!",
            "es": "Siento que necesitas un descanso. ¡Aquí hay contenido sin estrés!",
        },
        Mood.ROMANTIC: {
            "en": "Feeling romantic? I've found beautiful love stories for you!",
            "tr": "Romantik hissediyor musun? Senin için güzel aşk hikayeleri buldum!",
            "de": "Romantisch gestimmt? Ich habe schöne Liebesgeschichten gefunden!",
            "fr": "Vous vous sentez romantique? J'ai trouvé de belles histoires d'amour!",
            "es": "¿Te sientes romántico? ¡He encontrado hermosas historias de amor!",
        },
        Mood.NOSTALGIC: {
            "en": "Missing the good old days? Here are some classic gems from the past!",
            "tr": "Eski günleri özledin mi? Geçmişten klasik içerikler buldum!",
            "de": "Vermissen Sie die gute alte Zeit? Hier sind klassische Perlen aus der Vergangenheit!",
            "fr": "Vous manquez les bons vieux jours? Voici des classiques du passé!",
            "es": "¿Extrañas los viejos tiempos? ¡Aquí hay clásicos del pasado!",
        },
        Mood.ANGRY: {
            "en": "I can sense your mood. Here's intense content to match your energy!",
            "tr": "Ruh halini anlayabiliyorum. Enerjine uygun yoğun içerikler buldum!",
            "de": "Ich spüre Ihre Stimmung. Hier ist intensiver Inhalt!",
            "fr": "Je ressens votre humeur. Voici du contenu intense!",
            "es": "Puedo sentir tu estado de ánimo. ¡Aquí hay contenido intenso!",
        },
    },
    found_count={
        "en": "I found {count} {noun} for you! Take a look at the results below.",
        "tr": "Sizin için {count} {noun} buldum! Aşağıdaki sonuçlara göz atın.",
        "de": "Ich habe {count} {noun} für Sie gefunden! Schauen Sie sich die Ergebnisse unten an.",
        "fr": "J'ai trouvé {count} {noun} pour vous! Jetez un œil aux résultats ci-dessous.",
        "es": "¡Encontré {count} {noun} para ti! Echa un vistazo a los resultados a continuación.",
    },
    found_title={
        "en": 'Found it: "{title}"!',
        "tr": 'Aradığınız içerik: "{title}"!',
        "de": 'Gefunden: "{title}"!',
        "fr": 'Trouvé : "{title}" !',
        "es": '¡Lo encontré: "{title}"!',
    },
    content_nouns={
        "en": {ContentType.MOVIE: "movies", ContentType.TV: "shows", ContentType.BOTH: "titles"},
        "tr": {ContentType.MOVIE: "film", ContentType.TV: "dizi", ContentType.BOTH: "içerik"},
        "de": {ContentType.MOVIE: "Filme", ContentType.TV: "Serien", ContentType.BOTH: "Titel"},
        "fr": {ContentType.MOVIE: "films", ContentType.TV: "séries", ContentType.BOTH: "titres"},
        "es": {ContentType.MOVIE: "películas", ContentType.TV: "series", ContentType.BOTH: "títulos"},
    },
)
