"""
Built-in activity content
Used whenever the activities table has nothing for a page type
"""

from typing import Dict, List

DEFAULT_ACTIVITIES: Dict[str, List[dict]] = {
    "couple": [
        {
            "id": "default-couple-1",
            "title": "Carta do coração",
            "prompt": "Escrevam uma carta curta um para o outro sobre algo que admiram no parceiro. Leiam em voz alta juntos.",
            "category": "conversa",
            "emoji": "💌",
            "duration": 15,
        },
        {
            "id": "default-couple-2",
            "title": "Dança na sala",
            "prompt": "Escolham 3 músicas especiais para vocês e dancem juntos na sala. Vale abraçar apertado!",
            "category": "diversão",
            "emoji": "💃",
            "duration": 10,
        },
        {
            "id": "default-couple-3",
            "title": "Café da manhã surpresa",
            "prompt": "Um de vocês prepara um café da manhã especial para o outro amanhã. Capriche nos detalhes!",
            "category": "surpresa",
            "emoji": "☕",
            "duration": 30,
        },
        {
            "id": "default-couple-4",
            "title": "Jantar a dois",
            "prompt": "Cozinhem juntos uma receita que nenhum dos dois fez antes.",
            "category": "culinária",
            "emoji": "🍝",
            "duration": 60,
        },
    ],
    "friends": [
        {
            "id": "default-friends-1",
            "title": "Álbum de memórias",
            "prompt": "Escolham 5 fotos antigas de vocês e contem a história por trás de cada uma.",
            "category": "nostalgia",
            "emoji": "📸",
            "duration": 20,
        },
        {
            "id": "default-friends-2",
            "title": "Playlist da amizade",
            "prompt": "Montem juntos uma playlist com uma música que lembre cada fase da amizade.",
            "category": "diversão",
            "emoji": "🎧",
            "duration": 15,
        },
        {
            "id": "default-friends-3",
            "title": "Desafio do elogio",
            "prompt": "Mandem um áudio de um minuto dizendo o que mais admiram um no outro.",
            "category": "conversa",
            "emoji": "🎙️",
            "duration": 5,
        },
    ],
    "pet": [
        {
            "id": "default-pet-1",
            "title": "Passeio novo",
            "prompt": "Leve seu pet para passear por um caminho que vocês nunca fizeram.",
            "category": "passeio",
            "emoji": "🐾",
            "duration": 30,
        },
        {
            "id": "default-pet-2",
            "title": "Sessão de carinho",
            "prompt": "Reserve dez minutos só para escovar e fazer carinho no seu pet, sem celular por perto.",
            "category": "cuidado",
            "emoji": "🪮",
            "duration": 10,
        },
        {
            "id": "default-pet-3",
            "title": "Brinquedo caseiro",
            "prompt": "Crie um brinquedo com materiais de casa e veja qual é a reação do seu pet.",
            "category": "diversão",
            "emoji": "🧶",
            "duration": 20,
        },
    ],
}

WEEKLY_RITUALS: List[dict] = [
    {"type": "pergunta", "title": "Pergunta Profunda", "content": "Qual foi o momento em que você se sentiu mais amado(a) esta semana?"},
    {"type": "desafio", "title": "Desafio da Semana", "content": "Preparem uma refeição juntos sem usar o celular. Conversem sobre seus sonhos."},
    {"type": "pergunta", "title": "Pergunta Profunda", "content": "Se pudéssemos reviver um dia juntos, qual seria e por quê?"},
    {"type": "desafio", "title": "Desafio da Semana", "content": "Escrevam 3 coisas que admiram um no outro e compartilhem em voz alta."},
    {"type": "pergunta", "title": "Pergunta Profunda", "content": "O que vocês mais querem realizar juntos nos próximos 5 anos?"},
    {"type": "desafio", "title": "Desafio da Semana", "content": "Planejem uma mini-aventura para o próximo fim de semana, mesmo que simples."},
    {"type": "pergunta", "title": "Pergunta Profunda", "content": "Qual característica do outro você gostaria de ter?"},
    {"type": "desafio", "title": "Desafio da Semana", "content": "Surpreendam um ao outro com uma mensagem de carinho durante o dia."},
    {"type": "pergunta", "title": "Pergunta Profunda", "content": "Qual foi o obstáculo que vocês superaram juntos que mais os fortaleceu?"},
    {"type": "desafio", "title": "Desafio da Semana", "content": "Tirem uma foto juntos que represente este momento da vida de vocês."},
    {"type": "pergunta", "title": "Pergunta Profunda", "content": "O que te faz sorrir quando pensa no outro?"},
    {"type": "desafio", "title": "Desafio da Semana", "content": "Assistam ao pôr do sol ou nascer do sol juntos esta semana."},
]
