"""
utils/constants.py

Purpose: Centralized static content

- All user-facing messages (Turkish, Telegram HTML)
- Button labels
- Membership and admin text

(Prevents hardcoding across the codebase)
"""

# ============================================================
# COMMAND MENU
# ============================================================

COMMAND_MENU = """🔍 <b>Anlık ve Detaylı Veriler</b>
• /derinlik HISSE – 25 kademe anlık derinlik
• /teorik HISSE – Anlık teorik veri sorgusu
• /akd HISSE – Aracı kurum dağılımı
• /takas HISSE – Takas analizi
• /viop SEMBOL – VIOP vadeli kontrat analizi

📈 <b>Analiz ve Karşılaştırmalar</b>
• /karsilastir HISSE1 HISSE2 – İki hissenin karşılaştırılması

📊 <b>Finansal ve Teknik Görünümler</b>
• /temel HISSE – Şirket finansalları
• /teknik HISSE – Teknik göstergeler

📰 <b>Gündem ve Bilgilendirme</b>
• /haber HISSE – KAP haberleri
• /bulten – Günlük piyasa özeti

💹 <b>Yatırım Araçları</b>
• /favori – Favori hisselerinizi görün
• /favoriekle HISSE1,HISSE2 – Favori ekleyin
• /favoricikar HISSE1,HISSE2 – Favori çıkarın
• /favorisifirla – Tüm favorileri silin

ℹ️ <b>Sadece hisse kodu gönderin!</b>
Örnek: THYAO yazıp menüden seçin."""

HELP_MESSAGE = "🤖 <b>Borsa Analiz Botu - Komut Listesi</b>\n\n" + COMMAND_MENU

MEMBER_MENU_MESSAGE = "✅ <b>Tekrar hoş geldiniz!</b>\n\n" + COMMAND_MENU

# ============================================================
# MEMBERSHIP GATE
# ============================================================

WELCOME_AFTER_REQUEST_MESSAGE = (
    "✅ <b>Hoş geldiniz!</b>\n\n"
    "Katılma isteği gönderdiğiniz için botu kullanabilirsiniz!\n\n"
    + COMMAND_MENU
)

JOIN_PROMPT_MESSAGE = """🔒 <b>Private Kanal Üyeliği Gerekli</b>

Bot'u kullanabilmek için özel kanalımıza katılma isteği göndermelisiniz.

📝 <b>Katılım Süreci:</b>
1. Aşağıdaki linke tıklayın
2. "Katılma İsteği Gönder" butonuna basın
3. İstek gönderdiğiniz anda bot aktif olur
4. Onay beklemenize gerek yok!

👆 Sadece istek gönderin, hemen kullanmaya başlayın!"""

BOT_NOT_CONFIGURED_MESSAGE = "❌ Bot henüz yapılandırılmamış. Admin ile iletişime geçin."

CHANNEL_NOT_CONFIGURED_MESSAGE = "❌ Kanal ayarları yapılmamış."

NO_JOIN_REQUEST_MESSAGE = (
    "❌ Henüz kanala katılma isteği göndermemişsiniz. "
    "Lütfen önce yukarıdaki linkten istek gönderin."
)

JOIN_REQUEST_RECEIVED_MESSAGE = """✅ <b>Katılma İsteği Alındı!</b>

Artık botu kullanabilirsiniz! İsteğiniz admin tarafından değerlendirilecek.

🚀 <b>Başlamak için:</b>
• /start - Ana menü
• THYAO - Hisse analizi
• /bulten - Piyasa özeti

<b>Popüler Komutlar:</b>
• /derinlik THYAO
• /teknik AKBNK
• /haber GARAN"""

MEMBERSHIP_APPROVED_MESSAGE = """✅ <b>Hoş geldiniz!</b>

Kanal üyeliğiniz onaylandı. Artık botu kullanabilirsiniz!

/start komutu ile başlayabilirsiniz."""

BUTTON_JOIN_CHANNEL = "🔗 Kanala Katılma İsteği Gönder"
BUTTON_CHECK_MEMBERSHIP = "✅ İstek Gönderdiysem Kontrol Et"

# ============================================================
# MARKET DATA
# ============================================================

DATA_UNAVAILABLE_MESSAGE = "❌ {symbol} için veri alınamadı."
DEPTH_UNAVAILABLE_MESSAGE = "❌ {symbol} için derinlik verisi alınamadı."
THEORETICAL_UNAVAILABLE_MESSAGE = "❌ {symbol} için teorik veri alınamadı."
FUNDAMENTALS_UNAVAILABLE_MESSAGE = "❌ {symbol} için temel analiz verisi alınamadı."
TECHNICAL_UNAVAILABLE_MESSAGE = "❌ {symbol} için teknik analiz verisi alınamadı."
VIOP_UNAVAILABLE_MESSAGE = "❌ {symbol} için VIOP verisi alınamadı."
NEWS_UNAVAILABLE_MESSAGE = "📰 {symbol} için güncel haber bulunamadı."
BULLETIN_UNAVAILABLE_MESSAGE = "❌ Piyasa özeti şu anda alınamadı."

AKD_PENDING_MESSAGE = "🏢 {symbol} için AKD analizi hazırlanıyor..."
TAKAS_PENDING_MESSAGE = "💱 {symbol} için takas analizi hazırlanıyor..."

COMPARE_USAGE_MESSAGE = "❌ İki hisse kodu girin: /karsilastir THYAO AKBNK"
SYMBOL_USAGE_MESSAGE = "❌ Hisse kodu girin: {command} THYAO"

SYMBOL_MENU_MESSAGE = "📊 <b>{symbol}</b> için analiz seçin:{price_line}"

BUTTON_DEPTH = "📊 Derinlik"
BUTTON_THEORETICAL = "📈 Teorik"
BUTTON_AKD = "🏢 AKD"
BUTTON_TAKAS = "💱 Takas"
BUTTON_FUNDAMENTALS = "📋 Temel"
BUTTON_TECHNICAL = "📊 Teknik"
BUTTON_NEWS = "📰 Haberler"
BUTTON_VIOP = "📈 VIOP"
BUTTON_ADD_FAVORITE = "⭐ Favoriye Ekle"
BUTTON_REFRESH = "🔄 Yenile"

LAST_UPDATE_LINE = "<i>Son güncelleme: {timestamp}</i>"

# ============================================================
# FAVORITES
# ============================================================

NO_FAVORITES_MESSAGE = (
    "⭐ Henüz favori hisseniz yok.\n\n"
    "/favoriekle THYAO,AKBNK şeklinde hisse ekleyebilirsiniz."
)
FAVORITES_LIST_MESSAGE = "⭐ <b>Favori Hisseleriniz:</b>\n\n{favorites}"
FAVORITES_ADDED_MESSAGE = "✅ {symbols} favorilere eklendi."
FAVORITES_REMOVED_MESSAGE = "✅ {symbols} favorilerden çıkarıldı."
FAVORITES_CLEARED_MESSAGE = "✅ Tüm favoriler temizlendi."
FAVORITES_ADD_FAILED_MESSAGE = "❌ Favori eklenirken hata oluştu."
FAVORITES_REMOVE_FAILED_MESSAGE = "❌ Favori çıkarılırken hata oluştu."
FAVORITES_CLEAR_FAILED_MESSAGE = "❌ Favoriler temizlenirken hata oluştu."
FAVORITES_USAGE_MESSAGE = "❌ Hisse kodu girin: {command} THYAO,AKBNK"

# ============================================================
# ERRORS
# ============================================================

GENERIC_ERROR_MESSAGE = "❌ Bir hata oluştu. Lütfen daha sonra tekrar deneyin."

# ============================================================
# ADMIN
# ============================================================

ANNOUNCEMENT_TEMPLATE = "📢 <b>DUYURU</b>\n\n{message}"
