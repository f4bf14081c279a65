"""Dados iniciais do aplicativo (um único cliente)"""
import copy

CLIENT_IMAGE_URL = (
    "https://lh3.googleusercontent.com/aida-public/AB6AXuDC-pPnhOFSyslYWgAenCLYEWTRCoz1wPWZEddyFzjHxWK5tz_"
    "GBCrzk9IKaH-4Cdq66sJqqnM0hvAL51wwU1Q3fsERZTeFX6joeM7tJj_uG2t0Rpim066Q6RRCHjPfTFfLyR_IZ1x9v-Ha3avuyu"
    "Hcut4jER6VUsLWcY9RSStmctVfmrQ-OT5uxOJv_jSMLkm0XO3vP-KpAbRGuUsoyDbkP6bL_Fh3QZQg-2e-fDeaQiDShsL_MrxCxY"
    "Su-jIARrcCnwxrSsmpY4c"
)

REPORT_IMAGE_URL = (
    "https://lh3.googleusercontent.com/aida-public/AB6AXuD_U6yYoSwLKP8_WqO7DbYWXiH6Ya_wg96CSBmo25qA6_tTfxZ"
    "rVI1-kOYoRiArYkTlm7jvHuLYjn3pMWSC-vqn5vBjhWK3V6XHqvhXczez32JNywDqSe3n1-9ceafcYtb5RHONOp9AYaccIlnw4hv"
    "fpQmf7yR1X37bw91tjyZXa40EyxpBCsPtSAY_fRzMsg4thi74LPsWM5Mdxjh9JFm4--SAmiNJLgmZ6-KM4emGVsa5FZyiH0TM0TQ"
    "WQQ3Ah_cXwFSkDb157OI"
)

AVATAR_URL = (
    "https://lh3.googleusercontent.com/aida-public/AB6AXuDC9niU-TSiMRBfBf50rMQYVLXD9928-DL_YCS1BGesRf-rwkg"
    "jlJBobTHQuUbJuUL56MXjRREu21uMpZZAz-8_NLpmXPZ1H6dVZDfnUTZhpY0e4KeMz7q1RL1fOne01nNjuAYzMMH1B4xlItBujef"
    "bl2IdVy3d63j8JXYBIiHPMP__y9rkHYdt97UYckfFQGlKgl53KUeFv4pvHeDEYADMmgnp80bvR1rtKAGA92S6vfQxICNIA70YXyG"
    "AMJfxvhCNc118aA7kcaE"
)

# Chaves do agregado guardadas como JSON opaco (tabela app_state no modo relacional)
STATE_KEYS = (
    "inspection",
    "userProfile",
    "settings",
    "stats",
    "checklistEquipment",
    "checklistData",
    "reportClient",
)

SEED_DATA = {
    "client": {
        "name": "Nome do Cliente LLC",
        "address": "Rua Principal, 123, Qualquer Cidade, BR 12345",
        "contactPerson": "Joana Silva",
        "phone": "(11) 98765-4321",
        "email": "contato@cliente.com",
        "imageUrl": CLIENT_IMAGE_URL,
        "floorPlanUrl": None,
        "coverImageUrl": None,
    },
    "stats": [
        {"icon": "verified", "label": "Pontuação de Conformidade", "value": "98%", "variant": "success"},
        {"icon": "error", "label": "Falha de Equipamento", "value": 0, "variant": "critical"},
        {"icon": "notification_important", "label": "Próximas Validades", "value": 5, "variant": "warning"},
    ],
    "inspection": {"date": "26 de Outubro de 2024", "time": "10:00"},
    "equipmentData": [
        {
            "name": "Extintores de Incêndio",
            "icon": "fire_extinguisher",
            "items": [
                {"id": "FE-BLD1-FL2-004", "location": "Prédio 1, Andar 2, Ala Leste", "lastInspected": "2023-10-25", "status": "ok"},
                {"id": "FE-BLD1-FL2-005", "location": "Prédio 1, Andar 2, Ala Oeste", "lastInspected": "2023-09-11", "status": "fail"},
                {"id": "FE-BLD1-FL1-001", "location": "Prédio 1, Andar 1, Lobby", "lastInspected": "2023-10-02", "status": "maintenance"},
            ],
        },
        {
            "name": "Alarmes de Fumaça",
            "icon": "smoke_free",
            "items": [
                {"id": "SA-BLD1-FL2-015", "location": "Prédio 1, Andar 2, Corredor C", "lastInspected": "2023-10-25", "status": "ok"},
            ],
        },
        {
            "name": "Hidrantes de Incêndio",
            "icon": "fire_hydrant",
            "items": [
                {"id": "FH-EXT-PKG-001", "location": "Exterior, Estacionamento Norte", "lastInspected": "2023-10-18", "status": "ok"},
            ],
        },
    ],
    "checklistEquipment": {
        "id": "EXT-053",
        "name": "Extintor ABC 10lb",
        "building": "Escritório Principal",
        "floor": "2",
        "room": "Sala de Conferência B",
        "lastInspected": "2023-10-15",
        "lastInspector": "J. Doe",
        "lastStatus": "OK",
    },
    "checklistData": [
        {"id": "check1", "label": "O manômetro de pressão está na zona verde?", "checked": False},
        {"id": "check2", "label": "O pino e o lacre estão intactos?", "checked": False},
        {"id": "check3", "label": "Sem danos físicos óbvios, corrosão ou vazamentos?", "checked": False},
        {"id": "check4", "label": "O bico está livre de obstruções?", "checked": False},
        {"id": "check5", "label": "Está montado corretamente e acessível?", "checked": False},
        {"id": "check6", "label": "A etiqueta de inspeção está atualizada?", "checked": False},
        {"id": "check7", "label": "O registro de manutenção está em dia?", "checked": False},
        {"id": "check8", "label": "A data do teste hidrostático é válida?", "checked": False},
    ],
    "reportClient": {
        "name": "Sede Wayne Enterprises",
        "address": "Avenida das Indústrias, 1007, Gotham City",
        "inspectionDate": "26 de Out de 2023",
        "reportId": "#GTM-2023-1026",
        "imageUrl": REPORT_IMAGE_URL,
    },
    "userProfile": {
        "name": "João da Silva",
        "technicianId": "FI-12345",
        "company": "FireSafe Inc.",
        "avatarUrl": AVATAR_URL,
    },
    "settings": [
        {"title": "Conta", "items": [
            {"id": "edit-profile", "type": "link", "icon": "person", "label": "Editar Perfil", "href": "#"},
            {"id": "change-password", "type": "link", "icon": "lock", "label": "Alterar Senha", "href": "#"},
        ]},
        {"title": "Aplicativo", "items": [
            {"id": "dark-mode", "type": "toggle", "icon": "dark_mode", "label": "Modo Escuro"},
            {"id": "notifications", "type": "link", "icon": "notifications", "label": "Notificações", "href": "#"},
            {"id": "clear-cache", "type": "link", "icon": "cleaning_services", "label": "Limpar Cache", "href": "#"},
        ]},
        {"title": "Suporte e Legal", "items": [
            {"id": "help-center", "type": "link", "icon": "", "label": "Central de Ajuda", "href": "#"},
            {"id": "privacy-policy", "type": "link", "icon": "", "label": "Política de Privacidade", "href": "#"},
            {"id": "terms-of-service", "type": "link", "icon": "", "label": "Termos de Serviço", "href": "#"},
        ]},
    ],
    "inspectionHistory": [],
}


def seed_aggregate():
    """Retorna uma cópia independente dos dados iniciais"""
    return copy.deepcopy(SEED_DATA)
