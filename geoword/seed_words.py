"""Curated common Georgian words used to pre-seed the verdict cache."""

COMMON_GEORGIAN_WORDS = (
    # Greetings & basic
    'გამარჯობა', 'გაუმარჯოს', 'ნახვამდის', 'მადლობა', 'გმადლობთ',
    'კი', 'არა', 'დიახ', 'კარგი', 'ცუდი',
    'გეთაყვა', 'გეთაყვათ', 'ბოდიში', 'უკაცრავად', 'სიამოვნებით',
    'არაფრის', 'რა', 'როგორ', 'სად', 'როდის',

    # Common nouns
    'სახლი', 'ბინა', 'ქალაქი', 'ქუჩა', 'მანქანა',
    'წიგნი', 'მაგიდა', 'სკამი', 'ფანჯარა', 'კარი',
    'წყალი', 'საჭმელი', 'პური', 'ყავა', 'ჩაი',
    'ადამიანი', 'კაცი', 'ქალი', 'ბავშვი', 'მეგობარი',
    'დღე', 'ღამე', 'დილა', 'საღამო', 'საათი',
    'ფული', 'სამუშაო', 'სკოლა', 'უნივერსიტეტი', 'ბაღი',

    # Common verbs
    'მიდივარ', 'მოვდივარ', 'წავალ', 'მოვა', 'ვარ',
    'მაქვს', 'მინდა', 'მიყვარს', 'ვიცი', 'მესმის',
    'ვაკეთებ', 'ვწერ', 'ვკითხულობ', 'ვსაუბრობ', 'ვუსმენ',
    'ვჭამ', 'ვსვამ', 'ვიძინებ', 'ვმუშაობ', 'ვსწავლობ',
    'ვხედავ', 'ვფიქრობ', 'ვგრძნობ', 'ვიცინები', 'ვტირი',
    'ვაძლევ', 'ვიღებ', 'ვყიდულობ', 'ვყიდი', 'ვხსნი',

    # Pronouns & question words
    'მე', 'შენ', 'ის', 'ჩვენ', 'თქვენ', 'ისინი',
    'ვინ', 'რატომ', 'რამდენი', 'რომელი', 'ვისი',
    'რომ', 'რომც', 'როცა', 'სადაც', 'რომლის',
    'ვისაც', 'რასაც', 'როგორც', 'რამდენც',
)
